"""Install the agent package, retrying on failure."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import time
from collections.abc import Sequence

log = logging.getLogger(__name__)

RETRY_NUMBER = 10
RETRY_DELAY = 30.0

_COMMANDS = {
    "deb": "dpkg -i -E ./amazon-cloudwatch-agent.deb",
    "rpm": "rpm -U ./amazon-cloudwatch-agent.rpm",
}


def install_command(install_type: str, is_root: bool) -> str:
    """Return the command installing a ``deb`` or ``rpm`` package; ValueError otherwise."""
    if install_type not in _COMMANDS:
        raise ValueError("No valid package to install")
    command = _COMMANDS[install_type]
    return command if is_root else f"sudo {command}"


def install(install_type: str, retries: int = RETRY_NUMBER,
            retry_delay: float = RETRY_DELAY) -> bool:
    """Run the install command up to ``retries`` times; tell whether it succeeded."""
    is_root = hasattr(os, "geteuid") and os.geteuid() == 0
    command = install_command(install_type, is_root)
    for _ in range(retries):
        result = subprocess.run(["bash", "-c", command], capture_output=True)
        log.info("Install command output %s, returncode %s",
                 result.stdout.decode(errors="replace"), result.returncode)
        if result.returncode == 0:
            return True
        time.sleep(retry_delay)
    return False


def main(argv: Sequence[str] | None = None) -> int:
    """Install the package type named by the first argument."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    parser = argparse.ArgumentParser(description="Install the agent package.")
    parser.add_argument("install_type", help="deb or rpm")
    args = parser.parse_args(argv)
    try:
        install(args.install_type)
    except ValueError as err:
        log.error("%s", err)
        return 1
    return 0