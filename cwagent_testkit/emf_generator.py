"""Write embedded-metric-format log events to files at a steady rate."""

from __future__ import annotations

import argparse
import os
import random
import re
import sys
import threading
import time
from collections.abc import Sequence
from pathlib import Path

LOG_TRUNCATE_SIZE = 100 * 1024 * 1024

_EVENT_TEMPLATE = (
    '{"Type": "Cluster","Version": "0","TaskCount": 4,"CloudWatchMetrics": '
    '[{"Metrics": [{"Unit": "Count","Name": "TaskCount"}, {"Unit": "Count",'
    '"Name": "ServiceCount"}],"Dimensions": [["ClusterName"]],"Namespace": '
    '"IntegrationTest"}],"ClusterName": "cluster-integ-test","Timestamp":%d,'
    '"ServiceCount": 2}'
)

_UNITS = {"ns": 1e-9, "us": 1e-6, "\u00b5s": 1e-6, "\u03bcs": 1e-6,
          "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}
_DURATION_PART = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)")


def _parse_duration(text: str) -> float:
    """Parse a duration such as ``48h`` or ``1m30s`` into seconds."""
    sign = -1.0 if text[:1] == "-" else 1.0
    body = text[1:] if text[:1] in ("+", "-") else text
    if body == "0":
        return 0.0
    parts = _DURATION_PART.findall(body)
    if not body or "".join(a + u for a, u in parts) != body:
        raise argparse.ArgumentTypeError(f"invalid duration {text!r}")
    return sign * sum(float(amount) * _UNITS[unit] for amount, unit in parts)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def default_output_dir() -> str:
    """Directory the files go to when none is given."""
    return "C:\\tmp\\soakTest" if sys.platform == "win32" else "/tmp/soakTest"


def make_event(timestamp_ms: int) -> str:
    """Return one structured log event stamped with ``timestamp_ms``."""
    return _EVENT_TEMPLATE % timestamp_ms


def write_structured_log(directory: str | os.PathLike[str], prefix: str, index: int,
                         events_per_second: int, stop_event: threading.Event) -> Path:
    """Write events each second until ``stop_event`` is set; return the file's path.

    The file is emptied whenever it would pass LOG_TRUNCATE_SIZE.
    """
    directory = Path(directory)
    path = directory / f"{prefix}{index}.json"
    print(f"Creating file {path}")
    directory.mkdir(parents=True, exist_ok=True)
    event_size = len(make_event(_now_ms()))
    with path.open("w", encoding="utf-8", newline="") as out:
        file_size = 0
        # Jitter, so several files are not written at the same instant.
        if stop_event.wait(random.randrange(1000) / 1000):
            return path
        while not stop_event.wait(1.0):
            out.writelines(make_event(_now_ms()) + "\n" for _ in range(events_per_second))
            out.flush()
            os.fsync(out.fileno())
            file_size += events_per_second * event_size
            if file_size >= LOG_TRUNCATE_SIZE:
                out.seek(0)
                out.truncate()
                file_size = 0
    return path


def main(argv: Sequence[str] | None = None) -> int:
    """Generate structured log files for the given run time."""
    parser = argparse.ArgumentParser(description="Generate structured log files.")
    parser.add_argument("-fileNum", "--fileNum", type=int, default=1)
    parser.add_argument("-eventsPerSecond", "--eventsPerSecond", type=int, default=65)
    parser.add_argument("-path", "--path", default="")
    parser.add_argument("-filePrefix", "--filePrefix", default="structuredLogFile")
    parser.add_argument("-runTime", "--runTime", type=_parse_duration, default="48h")
    args = parser.parse_args(argv)
    directory = args.path or default_output_dir()

    stop = threading.Event()
    workers = [
        threading.Thread(target=write_structured_log, daemon=True,
                         args=(directory, args.filePrefix, index, args.eventsPerSecond, stop))
        for index in range(args.fileNum)
    ]
    for worker in workers:
        worker.start()
    stop.wait(max(args.runTime, 0.0))
    stop.set()
    for worker in workers:
        worker.join()
    return 0