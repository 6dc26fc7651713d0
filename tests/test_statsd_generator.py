import socket

import pytest

from cwagent_testkit.statsd_generator import StatsdClient, format_metric, run_client


class _ScriptedEvent:
    """Answers wait() from a script, then reports itself set."""

    def __init__(self, *answers):
        self._answers = list(answers)

    def wait(self, timeout=None):
        return self._answers.pop(0) if self._answers else True


@pytest.fixture
def server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2)
    yield sock
    sock.close()


def test_format_metric_plain():
    assert format_metric("SoakTest.", "x", 12, "g", [], 1) == "SoakTest.x:12|g"


def test_format_metric_rate_and_tags():
    line = format_metric("", "n", 1.5, "h", ["a", "b:c"], 0.5)
    assert line == "n:1.5|h|@0.5|#a,b:c"


def test_format_metric_float_without_exponent():
    line = format_metric("", "n", 1e-7, "h", [], 1)
    assert "e" not in line.split(":")[1]
    assert float(line.split(":")[1].split("|")[0]) == 1e-7


def test_client_buffers_until_flush(server):
    with StatsdClient(server.getsockname(), namespace="ns.", tags=["t:1"]) as client:
        client.gauge("a", 12, ["type:Gauge"])
        client.count("b", 2)
        client.flush()
        data = server.recv(65536).decode()
    assert data.split("\n") == [
        format_metric("ns.", "a", 12, "g", ["t:1", "type:Gauge"], 1),
        format_metric("ns.", "b", 2, "c", ["t:1"], 1),
    ]


def test_client_sends_when_buffer_full(server):
    with StatsdClient(server.getsockname(), buffer_size=2) as client:
        client.timing("t", 7)
        client.set("s", "abc")
        data = server.recv(65536).decode()
    assert data.split("\n") == ["t:7|ms", "s:abc|s"]


def test_sampled_out_metric_is_dropped(server):
    with StatsdClient(server.getsockname()) as client:
        client.histogram("dropped", 3.0, rate=0.0)
        client.histogram("kept", 3.0)
        client.flush()
        data = server.recv(65536).decode()
    assert data == format_metric("", "kept", 3.0, "h", [], 1)


def test_run_client_sends_one_round(server):
    run_client(7, 1000, 10, _ScriptedEvent(False, True), server.getsockname())
    lines = server.recv(65536).decode().split("\n")
    assert len(lines) == 10
    assert all(line.startswith("SoakTest.request.") for line in lines)
    assert all("clientId:7" in line for line in lines)
    assert {line.split("|")[1] for line in lines} == {"g", "ms", "c", "s", "h"}


@pytest.mark.parametrize("tps, metric_num", [(0, 100), (100, 0), (100000, 10)])
def test_run_client_rejects_bad_rates(server, tps, metric_num):
    with pytest.raises(ValueError):
        run_client(0, tps, metric_num, _ScriptedEvent(True), server.getsockname())