# cwagent-testkit

Tools for integration testing a metrics and logs agent:

- `cwagent_testkit.types` – enumerations for the compute type (`ComputeType`),
  ECS launch type (`ECSLaunchType`) and ECS/EKS deployment strategies
  (`ECSDeploymentType`, `EKSDeploymentType`), each with a case-insensitive
  `parse` class method that raises `ValueError` on unknown names.
- `cwagent_testkit.metadata` – the environment command-line flags
  (`register_flags`, `parse_flags`) and their validation into a `MetaData`
  (`build_metadata`), raising `InvalidComputeTypeError` when the compute type
  is missing or unknown.
- `cwagent_testkit.permissions` – POSIX file mode and ownership checks.
- `cwagent_testkit.install_agent` – installs a `deb` or `rpm` package with retries.
- `cwagent_testkit.msi_version` – converts an agent version to an MSI version.
- `cwagent_testkit.emf_generator`, `cwagent_testkit.log_generator`,
  `cwagent_testkit.statsd_generator` – load generators.

## Installation

```
pip install .
pip install ".[test]"   # to run the test suite
```

## Commands

Every command takes its options with one dash or two (`-fileNum` or `--fileNum`).
Run times are durations such as `48h`, `1h30m` or `90s`.

Install `./amazon-cloudwatch-agent.deb` or `./amazon-cloudwatch-agent.rpm`
from the current directory, up to 10 times, 30 seconds apart; `sudo` is
added when not running as root:

```
cwagent-install rpm
```

Convert an agent version to an MSI version and put it into a file in place
of every occurrence of a key. The second field of the version is split into
a minor number (divided by 65536) and a build number (the remainder), so
`1.300031.0` becomes `1.4.37167`:

```
cwagent-msi-version 1.300031.0 product.wxs MSI_VERSION_KEY
```

Generate structured (EMF) log files `<filePrefix><n>.json`, emptied once
they pass 100 MiB (defaults: 1 file, 65 events per second, prefix
`structuredLogFile`, run time 48h, directory `/tmp/soakTest`):

```
cwagent-emf-generator --fileNum 2 --eventsPerSecond 65 --path /tmp/soakTest --runTime 1h
```

Generate log files `<filePrefix><n>.log` in which every tenth line starts
with a timestamp, emptied once they pass 32 MiB (defaults: 1 file, 200
events per second, 120-byte lines, prefix `tmp`, run time 48h):

```
cwagent-log-generator --fileNum 1 --eventsPerSecond 200 --eventSize 120 --runTime 1h
```

Send DogStatsD gauges, timings, counts, sets and histograms over UDP to
`127.0.0.1:8125`, namespaced `SoakTest.`:

```
cwagent-statsd-generator --clientNum 1 --tps 100 --metricNum 100 --runTime 1h
```

## Library use

```python
from cwagent_testkit.metadata import parse_flags, build_metadata
from cwagent_testkit.types import ComputeType

strings = parse_flags(["-computeType", "EC2", "-plugins", "cpu, Mem"])
meta = build_metadata(strings, cluster_name_resolver=lambda arn: arn.rsplit("/", 1)[-1])
assert meta.compute_type is ComputeType.EC2
assert meta.ec2_plugin_tests == {"cpu", "mem"}
```

```python
from cwagent_testkit.permissions import (
    FilePermission, FilePermissionError, file_has_permission, check_file_owner_rights,
)

file_has_permission("/etc/hosts", FilePermission.OWNER_READ)
try:
    check_file_owner_rights("/etc/hosts", "root")
except FilePermissionError as err:
    print(err)
```

```python
from cwagent_testkit.statsd_generator import StatsdClient, format_metric

format_metric("app.", "requests", 2, "c", ["env:test"], 1)  # 'app.requests:2|c|#env:test'
with StatsdClient(("127.0.0.1", 8125), namespace="app.") as client:
    client.gauge("load", 0.5)
```

Run the tests with `pytest`.

## What this package does not do

- It does not start, stop or talk to the agent, and does not run test suites
  against cloud services; there are no test runners or metric fetchers.
- The ECS cluster name is filled in only through the `cluster_name_resolver`
  given to `build_metadata`; nothing here looks it up.
- File permission checks use POSIX modes, users and groups only; there are
  no Windows access-control checks.