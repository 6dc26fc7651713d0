"""Command-line metadata describing the environment a test runs in."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, fields

from .types import ComputeType, ECSDeploymentType, ECSLaunchType, EKSDeploymentType

log = logging.getLogger(__name__)

DEFAULT_EC2_AGENT_START_COMMAND = (
    "sudo /opt/aws/amazon-cloudwatch-agent/bin/amazon-cloudwatch-agent-ctl "
    "-a fetch-config -m ec2 -s -c "
)
DEFAULT_S3_KEY = "release/amazon_linux/amd64/latest/amazon-cloudwatch-agent.rpm"


class InvalidComputeTypeError(ValueError):
    """Raised when the compute type flag is missing or not recognised."""


@dataclass
class MetaDataStrings:
    """Raw flag values as given on the command line."""

    compute_type: str = ""
    ecs_launch_type: str = ""
    ecs_deployment_strategy: str = ""
    eks_deployment_strategy: str = ""
    ecs_cluster_arn: str = ""
    cwagent_config_ssm_param_name: str = ""
    ecs_service_name: str = ""
    ec2_plugin_tests: str = ""
    excluded_tests: str = ""
    bucket: str = ""
    s3_key: str = DEFAULT_S3_KEY
    cwa_commit_sha: str = ""
    ca_cert_path: str = ""
    eks_cluster_name: str = ""
    proxy_url: str = ""
    assume_role_arn: str = ""
    instance_id: str = ""
    agent_start_command: str = DEFAULT_EC2_AGENT_START_COMMAND


@dataclass
class MetaData:
    """Validated environment description."""

    compute_type: ComputeType
    ecs_launch_type: ECSLaunchType | None = None
    ecs_deployment_strategy: ECSDeploymentType | None = None
    eks_deployment_strategy: EKSDeploymentType | None = None
    ecs_cluster_arn: str = ""
    ecs_cluster_name: str = ""
    cwagent_config_ssm_param_name: str = ""
    ecs_service_name: str = ""
    ec2_plugin_tests: frozenset[str] = field(default_factory=frozenset)
    excluded_tests: frozenset[str] = field(default_factory=frozenset)
    bucket: str = ""
    s3_key: str = ""
    cwa_commit_sha: str = ""
    ca_cert_path: str = ""
    eks_cluster_name: str = ""
    proxy_url: str = ""
    assume_role_arn: str = ""
    instance_id: str = ""
    agent_start_command: str = ""


# (flag name, destination field, help text)
_FLAGS: tuple[tuple[str, str, str], ...] = (
    ("computeType", "compute_type", "EC2/ECS/EKS"),
    ("ecsLaunchType", "ecs_launch_type", "EC2 or Fargate"),
    ("ecsDeploymentStrategy", "ecs_deployment_strategy", "Daemon/Replica/Sidecar"),
    ("clusterArn", "ecs_cluster_arn",
     "Used to restart ecs task to apply new agent config"),
    ("cwagentConfigSsmParamName", "cwagent_config_ssm_param_name",
     "Used to set new cwa config"),
    ("cwagentECSServiceName", "ecs_service_name",
     "Used to restart ecs task to apply new agent config"),
    ("eksClusterName", "eks_cluster_name", "EKS cluster name"),
    ("eksDeploymentStrategy", "eks_deployment_strategy", "Daemon/Replica/Sidecar"),
    ("bucket", "bucket", "s3 bucket ex cloudwatch-agent-integration-bucket"),
    ("s3key", "s3_key", "s3 key ex cloudwatch-agent-integration-bucket"),
    ("cwaCommitSha", "cwa_commit_sha", "agent commit hash"),
    ("caCertPath", "ca_cert_path",
     "ec2 path to crts ex /etc/ssl/certs/ca-certificates.crt"),
    ("plugins", "ec2_plugin_tests",
     "Comma-delimited list of plugins to test. Default is empty, which tests all"),
    ("excludedTests", "excluded_tests",
     "Comma-delimited list of test to exclude. Default is empty, which tests all"),
    ("proxyUrl", "proxy_url",
     "Public IP address of a proxy instance. Default is empty with no proxy"),
    ("assumeRoleArn", "assume_role_arn", "Arn for assume role to be used"),
    ("instanceId", "instance_id", "ec2 instance ID that is being used by a test"),
    ("agentStartCommand", "agent_start_command",
     "Start command differs between ec2 and onprem, linux and windows. "
     "Default is for EC2 with Linux"),
)

_DEFAULTS = {f.name: f.default for f in fields(MetaDataStrings)}


def register_flags(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add the environment flags to ``parser`` and return it."""
    for flag, dest, help_text in _FLAGS:
        parser.add_argument(
            f"-{flag}",
            f"--{flag}",
            dest=dest,
            default=_DEFAULTS[dest],
            help=help_text,
        )
    return parser


def parse_flags(argv: Sequence[str] | None = None) -> MetaDataStrings:
    """Parse the environment flags from ``argv``."""
    parser = register_flags(argparse.ArgumentParser(allow_abbrev=False))
    namespace = parser.parse_args(argv)
    return MetaDataStrings(**{dest: getattr(namespace, dest) for _, dest, _ in _FLAGS})


def parse_name_set(text: str) -> frozenset[str]:
    """Turn a comma-delimited list into a set of lower-case names.

    Spaces are removed; an empty string gives an empty set.
    """
    if not text:
        return frozenset()
    return frozenset(name.lower() for name in text.replace(" ", "").split(","))


def build_metadata(
    strings: MetaDataStrings,
    cluster_name_resolver: Callable[[str], str] | None = None,
) -> MetaData:
    """Validate raw flag values and build a MetaData.

    ``cluster_name_resolver`` maps an ECS cluster ARN to its cluster name;
    without one the cluster name is left empty.
    """
    try:
        compute_type = ComputeType.parse(strings.compute_type)
    except ValueError:
        raise InvalidComputeTypeError(
            "Invalid compute type. Needs to be EC2/ECS/EKS. "
            "Compute Type is a required flag. :" + strings.compute_type
        ) from None

    data = MetaData(
        compute_type=compute_type,
        bucket=strings.bucket,
        s3_key=strings.s3_key,
        cwa_commit_sha=strings.cwa_commit_sha,
        ca_cert_path=strings.ca_cert_path,
        proxy_url=strings.proxy_url,
        assume_role_arn=strings.assume_role_arn,
        instance_id=strings.instance_id,
        agent_start_command=strings.agent_start_command,
    )

    if compute_type is ComputeType.ECS:
        _fill_ecs(data, strings, cluster_name_resolver)
    elif compute_type is ComputeType.EKS:
        _fill_eks(data, strings)
    elif compute_type is ComputeType.EC2:
        _fill_ec2(data, strings)
    return data


def _fill_ecs(
    data: MetaData,
    strings: MetaDataStrings,
    cluster_name_resolver: Callable[[str], str] | None,
) -> None:
    try:
        data.ecs_launch_type = ECSLaunchType.parse(strings.ecs_launch_type)
    except ValueError:
        log.warning(
            "Invalid launch type %s. This might be because it wasn't provided "
            "for non-ECS tests", strings.ecs_launch_type,
        )
    try:
        data.ecs_deployment_strategy = ECSDeploymentType.parse(
            strings.ecs_deployment_strategy
        )
    except ValueError:
        log.warning(
            "Invalid deployment strategy %s. This might be because it wasn't "
            "provided for non-ECS tests", strings.ecs_deployment_strategy,
        )
    data.ecs_cluster_arn = strings.ecs_cluster_arn
    data.cwagent_config_ssm_param_name = strings.cwagent_config_ssm_param_name
    data.ecs_service_name = strings.ecs_service_name
    if cluster_name_resolver is not None:
        data.ecs_cluster_name = cluster_name_resolver(strings.ecs_cluster_arn)


def _fill_eks(data: MetaData, strings: MetaDataStrings) -> None:
    try:
        data.eks_deployment_strategy = EKSDeploymentType.parse(
            strings.eks_deployment_strategy
        )
    except ValueError:
        log.warning(
            "Invalid deployment strategy %s. This might be because it wasn't "
            "provided for non-EKS tests", strings.eks_deployment_strategy,
        )
    data.eks_cluster_name = strings.eks_cluster_name


def _fill_ec2(data: MetaData, strings: MetaDataStrings) -> None:
    if strings.ec2_plugin_tests:
        data.ec2_plugin_tests = parse_name_set(strings.ec2_plugin_tests)
        log.info("Executing subset of plugin tests: %s", sorted(data.ec2_plugin_tests))
    else:
        log.info("Testing all EC2 plugins")
    if strings.excluded_tests:
        data.excluded_tests = parse_name_set(strings.excluded_tests)
        log.info("Excluding subset of tests: %s", sorted(data.excluded_tests))
    else:
        log.info("Testing all EC2 plugins")