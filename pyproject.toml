[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cwagent-testkit"
version = "0.1.0"
description = "Environment flags, file permission checks, installers and load generators for integration testing a metrics and logs agent"
requires-python = ">=3.10"
dependencies = []
keywords = ["testing", "integration", "load-generator", "statsd", "emf", "logs"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cwagent-install = "cwagent_testkit.install_agent:main"
cwagent-msi-version = "cwagent_testkit.msi_version:main"
cwagent-emf-generator = "cwagent_testkit.emf_generator:main"
cwagent-log-generator = "cwagent_testkit.log_generator:main"
cwagent-statsd-generator = "cwagent_testkit.statsd_generator:main"

[tool.hatch.build.targets.wheel]
packages = ["cwagent_testkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
