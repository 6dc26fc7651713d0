"""Send a steady stream of DogStatsD metrics to a local agent."""

from __future__ import annotations

import argparse
import logging
import random
import socket
import threading
import time
from collections.abc import Iterable, Sequence
from decimal import Decimal

from .emf_generator import _parse_duration

log = logging.getLogger(__name__)

OPERATION_NUM = 5  # operations sent per metric index in one round
DEFAULT_ADDRESS = ("127.0.0.1", 8125)


def _format_value(value: object) -> str:
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    text = format(Decimal(repr(float(value))), "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def format_metric(namespace: str, name: str, value: object, metric_type: str,
                  tags: Iterable[str], rate: float) -> str:
    """Return one metric in DogStatsD line format."""
    line = f"{namespace}{name}:{_format_value(value)}|{metric_type}"
    if rate != 1:
        line += f"|@{_format_value(rate)}"
    tags = list(tags)
    if tags:
        line += "|#" + ",".join(tags)
    return line


class StatsdClient:
    """Buffered DogStatsD client sending over UDP."""

    def __init__(self, address: tuple[str, int] = DEFAULT_ADDRESS, namespace: str = "",
                 tags: Iterable[str] = (), buffer_size: int = 100) -> None:
        self.namespace = namespace
        self.tags = list(tags)
        self.buffer_size = buffer_size
        self._buffer: list[str] = []
        self._lock = threading.Lock()
        family, kind, proto, _, sockaddr = socket.getaddrinfo(
            address[0], address[1], type=socket.SOCK_DGRAM)[0]
        self._socket = socket.socket(family, kind, proto)
        self._socket.connect(sockaddr)

    def __enter__(self) -> StatsdClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _submit(self, name: str, value: object, metric_type: str,
                tags: Iterable[str], rate: float) -> None:
        if rate < 1 and random.random() > rate:
            return
        line = format_metric(self.namespace, name, value, metric_type, [*self.tags, *tags], rate)
        with self._lock:
            self._buffer.append(line)
            if len(self._buffer) >= self.buffer_size:
                self._send_locked()

    def _send_locked(self) -> None:
        if self._buffer:
            packet = "\n".join(self._buffer).encode()
            self._buffer.clear()
            self._socket.send(packet)

    def gauge(self, name: str, value: float, tags: Iterable[str] = (), rate: float = 1.0) -> None:
        """Record the current value of a gauge."""
        self._submit(name, value, "g", tags, rate)

    def timing(self, name: str, milliseconds: float, tags: Iterable[str] = (),
               rate: float = 1.0) -> None:
        """Record a duration in milliseconds."""
        self._submit(name, milliseconds, "ms", tags, rate)

    def count(self, name: str, value: int, tags: Iterable[str] = (), rate: float = 1.0) -> None:
        """Add ``value`` to a counter."""
        self._submit(name, value, "c", tags, rate)

    def set(self, name: str, value: str, tags: Iterable[str] = (), rate: float = 1.0) -> None:
        """Record a member of a set of unique values."""
        self._submit(name, value, "s", tags, rate)

    def histogram(self, name: str, value: float, tags: Iterable[str] = (),
                  rate: float = 1.0) -> None:
        """Record a sample for a histogram."""
        self._submit(name, value, "h", tags, rate)

    def flush(self) -> None:
        """Send whatever is buffered."""
        with self._lock:
            self._send_locked()

    def close(self) -> None:
        """Flush and close the socket."""
        try:
            self.flush()
        finally:
            self._socket.close()


def run_client(client_id: int, tps: int, metric_num: int, stop_event: threading.Event,
               address: tuple[str, int] = DEFAULT_ADDRESS) -> None:
    """Send ``metric_num`` unique metrics at ``tps`` until ``stop_event`` is set."""
    if tps <= 0 or metric_num <= 0:
        raise ValueError("tps and metric_num must be positive")
    send_rate = 1000 / (tps / metric_num)
    interval_ms = int(send_rate)
    if interval_ms <= 0:
        raise ValueError(f"non-positive send interval for tps {tps} and {metric_num} metrics")
    tags = [
        f"clientId:{client_id}", "region:us-west-2", "airportCode:pdx", "tag_name_only",
        "long_tag_name.long_tag_name.long_tag_name.long_tag_name.long_tag_name:"
        "long_tag_value.long_tag_value.long_tag_value.long_tag_value.long_tag_value",
    ]
    with StatsdClient(address, namespace="SoakTest.", tags=tags) as client:
        while not stop_event.wait(interval_ms / 1000):
            started = time.monotonic()
            for index in range(metric_num // OPERATION_NUM):
                operations = [
                    ("Gauge", client.gauge, 12),
                    ("Timing", client.timing, int(random.random() * 100)),
                    ("Count", client.count, 2),
                    ("Set", client.set, str(random.randrange(1000))),
                    ("Histogram", client.histogram, random.random() * 1000),
                ]
                for kind, send, value in operations:
                    try:
                        send(f"request.{kind}.{index}", value, [f"type:{kind}"], 1)
                    except OSError as err:
                        log.error("Client %s Func %s err: %s", client_id, kind, err)
            try:
                client.flush()
            except OSError as err:
                log.error("Client %s Func %s err: %s", client_id, "Flush", err)
            elapsed = time.monotonic() - started
            if elapsed > interval_ms / 1000:
                log.info("Completed %d request in %.3fs, supposed to be completed within "
                         "%s milliseconds.", OPERATION_NUM * (metric_num // OPERATION_NUM),
                         elapsed, send_rate)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the statsd clients for the given run time."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    parser = argparse.ArgumentParser(description="Generate statsd traffic.")
    parser.add_argument("-clientNum", "--clientNum", type=int, default=1)
    parser.add_argument("-tps", "--tps", type=int, default=100)
    parser.add_argument("-metricNum", "--metricNum", type=int, default=100)
    parser.add_argument("-runTime", "--runTime", type=_parse_duration, default="48h")
    args = parser.parse_args(argv)
    log.info("Start statsd generator %d client, and each client sends %d tps with "
             "%d unique metrics...", args.clientNum, args.tps, args.metricNum)
    stop = threading.Event()
    workers = [
        threading.Thread(target=run_client, daemon=True,
                         args=(client_id, args.tps, args.metricNum, stop))
        for client_id in range(args.clientNum)
    ]
    for worker in workers:
        worker.start()
    stop.wait(max(args.runTime, 0.0))
    stop.set()
    for worker in workers:
        worker.join()
    return 0