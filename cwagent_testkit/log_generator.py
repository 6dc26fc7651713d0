"""Write plain and multiline log lines to files at a steady rate."""

from __future__ import annotations

import argparse
import os
import random
import threading
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from .emf_generator import _parse_duration, default_output_dir

LOG_TRUNCATE_SIZE = 32 * 1024 * 1024
MULTILINE_RATIO = 10  # every tenth line starts with a timestamp

TIME_FORMAT = "%d %b %y %H:%M:%S %Z"
_TIMESTAMP_WIDTH = len("02 Jan 06 15:04:05 MST")


def _timestamp(now: datetime | None = None) -> str:
    return (now or datetime.now().astimezone()).strftime(TIME_FORMAT)


def build_log_entry(event_size: int) -> str:
    """Return the filler of a line ``event_size`` bytes long with its newline."""
    return "A" * max(event_size - 1, 0)


def multiline_line(entry: str, now: datetime) -> str:
    """Return a line that starts with a timestamp, as a multiline starter."""
    keep = len(entry) - _TIMESTAMP_WIDTH - 1
    if keep < 0:
        raise ValueError(f"log entry of {len(entry)} bytes is too short for a timestamp")
    return f"{_timestamp(now)} {entry[:keep]}\n"


def plain_line(entry: str, instance_id: int) -> str:
    """Return a continuation line tagged with ``instance_id``."""
    prefix = f" line starter{instance_id} "
    keep = len(entry) - len(prefix)
    if keep < 0:
        raise ValueError(f"log entry of {len(entry)} bytes is too short for a line prefix")
    return f"{prefix}{entry[:keep]}\n"


def write_log(directory: str | os.PathLike[str], prefix: str, instance_id: int, entry: str,
              events_per_second: int, stop_event: threading.Event) -> Path:
    """Write lines each second until ``stop_event`` is set; return the file's path.

    The file is emptied whenever it would pass LOG_TRUNCATE_SIZE.
    """
    directory = Path(directory)
    path = directory / f"{prefix}{instance_id}.log"
    print(f"Creating file {path}")
    directory.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as out:
        file_size = 0
        # Jitter, so several files are not written at the same instant.
        if stop_event.wait(random.randrange(1000) / 1000):
            return path
        while not stop_event.wait(1.0):
            print(f"{_timestamp()} Starting...")
            out.writelines(
                multiline_line(entry, datetime.now().astimezone())
                if index % MULTILINE_RATIO == 0 else plain_line(entry, instance_id)
                for index in range(events_per_second)
            )
            out.flush()
            os.fsync(out.fileno())
            file_size += events_per_second * (len(entry) + 1)
            if file_size >= LOG_TRUNCATE_SIZE:
                out.seek(0)
                out.truncate()
                file_size = 0
            print(f"{_timestamp()} Ended.")
    return path


def main(argv: Sequence[str] | None = None) -> int:
    """Generate log files for the given run time."""
    parser = argparse.ArgumentParser(description="Generate log files.")
    parser.add_argument("-fileNum", "--fileNum", type=int, default=1)
    parser.add_argument("-eventsPerSecond", "--eventsPerSecond", type=int, default=200)
    parser.add_argument("-eventSize", "--eventSize", type=int, default=120)
    parser.add_argument("-path", "--path", default="")
    parser.add_argument("-filePrefix", "--filePrefix", default="tmp")
    parser.add_argument("-runTime", "--runTime", type=_parse_duration, default="48h")
    args = parser.parse_args(argv)
    print(f"Start writing {args.fileNum} files, and each file has throughput "
          f"{args.eventsPerSecond * args.eventSize} Bytes/sec...")
    directory = args.path or default_output_dir()
    entry = build_log_entry(args.eventSize)

    stop = threading.Event()
    workers = [
        threading.Thread(target=write_log, daemon=True,
                         args=(directory, args.filePrefix, index, entry, args.eventsPerSecond, stop))
        for index in range(args.fileNum)
    ]
    for worker in workers:
        worker.start()
    stop.wait(max(args.runTime, 0.0))
    stop.set()
    for worker in workers:
        worker.join()
    return 0