"""Convert an agent version into one an MSI installer accepts.

An MSI build number must stay below 65536, so the agent's second version
field is split into a minor and a build number.
"""

from __future__ import annotations

import argparse
import logging
import os
import re
from collections.abc import Sequence
from pathlib import Path

log = logging.getLogger(__name__)

_BUILD_LIMIT = 65536
_INTEGER = re.compile(r"[+-]?[0-9]+")


def to_msi_version(agent_version: str) -> str:
    """Return the MSI version; ValueError if the second field is not an integer."""
    parts = agent_version.split(".")
    if len(parts) < 2 or not _INTEGER.fullmatch(parts[1]):
        raise ValueError(f"Failed to parse agentVersion {agent_version!r}")
    number = int(parts[1])
    minor, patch = divmod(abs(number), _BUILD_LIMIT)
    if number < 0:  # truncating division, as for positive numbers
        minor, patch = -minor, -patch
    return f"{parts[0]}.{minor}.{patch}"


def replace_value(path: str | os.PathLike[str], key: str, value: str) -> None:
    """Replace every occurrence of ``key`` in the file at ``path`` with ``value``."""
    target = Path(path)
    target.write_text(target.read_text(encoding="utf-8").replace(key, value), encoding="utf-8")


def main(argv: Sequence[str] | None = None) -> int:
    """Write the MSI version of an agent version into a file in place of a key."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    parser = argparse.ArgumentParser(description="Put the MSI version into a file.")
    parser.add_argument("agent_version")
    parser.add_argument("path")
    parser.add_argument("key")
    args = parser.parse_args(argv)
    log.info("Input %s", vars(args))
    try:
        msi_version = to_msi_version(args.agent_version)
        log.info("Msi version is %s", msi_version)
        replace_value(args.path, args.key, msi_version)
    except (ValueError, OSError) as err:
        log.error("%s", err)
        return 1
    return 0