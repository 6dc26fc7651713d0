"""Environment flags, file permission checks, installers and load generators for agent integration tests."""

__version__ = "0.1.0"
__all__ = [
    "types",
    "metadata",
    "permissions",
    "install_agent",
    "msi_version",
    "emf_generator",
    "log_generator",
    "statsd_generator",
]