"""Enumerations describing the environment a test runs in."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

_E = TypeVar("_E", bound=Enum)


def _parse(cls: type[_E], text: str) -> _E:
    try:
        return cls(text.upper())
    except ValueError:
        choices = "/".join(member.value for member in cls)
        raise ValueError(
            f"invalid {cls.__name__} {text!r}; expected one of {choices}"
        ) from None


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class ComputeType(_StrEnum):
    """Where the agent under test runs."""

    EC2 = "EC2"
    ECS = "ECS"
    EKS = "EKS"

    @classmethod
    def parse(cls, text: str) -> ComputeType:
        """Return the member named by ``text``, ignoring case; ValueError if none."""
        return _parse(cls, text)


class ECSLaunchType(_StrEnum):
    """How an ECS task is launched."""

    EC2 = "EC2"
    FARGATE = "FARGATE"

    @classmethod
    def parse(cls, text: str) -> ECSLaunchType:
        """Return the member named by ``text``, ignoring case; ValueError if none."""
        return _parse(cls, text)


class ECSDeploymentType(_StrEnum):
    """How the agent is deployed on ECS."""

    DAEMON = "DAEMON"
    REPLICA = "REPLICA"
    SIDECAR = "SIDECAR"

    @classmethod
    def parse(cls, text: str) -> ECSDeploymentType:
        """Return the member named by ``text``, ignoring case; ValueError if none."""
        return _parse(cls, text)


class EKSDeploymentType(_StrEnum):
    """How the agent is deployed on EKS."""

    DAEMON = "DAEMON"
    REPLICA = "REPLICA"
    SIDECAR = "SIDECAR"

    @classmethod
    def parse(cls, text: str) -> EKSDeploymentType:
        """Return the member named by ``text``, ignoring case; ValueError if none."""
        return _parse(cls, text)