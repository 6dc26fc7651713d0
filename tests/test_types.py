import pytest

from cwagent_testkit.types import (
    ComputeType,
    ECSDeploymentType,
    ECSLaunchType,
    EKSDeploymentType,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("EC2", ComputeType.EC2),
        ("ec2", ComputeType.EC2),
        ("Ecs", ComputeType.ECS),
        ("eks", ComputeType.EKS),
    ],
)
def test_compute_type_parse_ignores_case(text, expected):
    assert ComputeType.parse(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("ec2", ECSLaunchType.EC2),
        ("Fargate", ECSLaunchType.FARGATE),
        ("FARGATE", ECSLaunchType.FARGATE),
    ],
)
def test_ecs_launch_type_parse(text, expected):
    assert ECSLaunchType.parse(text) is expected


@pytest.mark.parametrize("cls", [ECSDeploymentType, EKSDeploymentType])
@pytest.mark.parametrize("name", ["daemon", "Replica", "SIDECAR"])
def test_deployment_types_parse(cls, name):
    member = cls.parse(name)
    assert member.value == name.upper()
    assert isinstance(member, cls)


@pytest.mark.parametrize(
    "cls",
    [ComputeType, ECSLaunchType, ECSDeploymentType, EKSDeploymentType],
)
@pytest.mark.parametrize("text", ["", "unknown", "EC2X"])
def test_parse_rejects_unknown(cls, text):
    with pytest.raises(ValueError):
        cls.parse(text)


def test_fargate_is_not_a_compute_type():
    with pytest.raises(ValueError):
        ComputeType.parse("FARGATE")


@pytest.mark.parametrize(
    "cls",
    [ComputeType, ECSLaunchType, ECSDeploymentType, EKSDeploymentType],
)
def test_parse_round_trips_every_member(cls):
    for member in cls:
        assert cls.parse(str(member).lower()) is member
        assert member == member.value