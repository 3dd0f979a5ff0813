from __future__ import annotations

import threading

from telemetry.facade.kinds import INVALID_METRIC_ID, MetricKind
from telemetry.runtime.channel import CommandChannel
from telemetry.runtime.commands import Exit, Register, Timestamp, Update, Value


def test_send_and_recv_preserve_order():
    ch = CommandChannel()
    cmds = [Timestamp(1.0), Update(0, Value.int64(1)), Update(0, Value.int64(2)), Exit()]
    for c in cmds:
        assert ch.send(c) is True

    assert [ch.recv() for _ in cmds] == cmds


def test_request_round_trip():
    ch = CommandChannel()

    def _consumer() -> None:
        cmd = ch.recv()
        assert isinstance(cmd, Register)
        assert (cmd.name, cmd.kind, cmd.unit) == ("a", MetricKind.INT32, "V")
        cmd.reply.set_result(7)

    t = threading.Thread(target=_consumer)
    t.start()
    assert ch.request("a", MetricKind.INT32, "V") == 7
    t.join(timeout=1.0)


def test_request_after_close_returns_sentinel_immediately():
    ch = CommandChannel()
    ch.close()
    assert ch.request("a", MetricKind.INT8, "") == INVALID_METRIC_ID


def test_send_after_close_is_dropped():
    ch = CommandChannel()
    ch.close()
    assert ch.closed
    assert ch.send(Update(0, Value.int64(1))) is False
    assert ch.qsize() == 0


def test_close_abandons_queued_registrations():
    ch = CommandChannel()
    results: list[int] = []

    t = threading.Thread(target=lambda: results.append(ch.request("late", MetricKind.UINT8, "")))
    t.start()

    # wait until the Register is queued
    pause = threading.Event()
    for _ in range(200):
        if ch.qsize():
            break
        pause.wait(0.005)

    ch.send(Update(0, Value.int64(1)))
    leftover = ch.close()
    t.join(timeout=1.0)

    assert not t.is_alive()
    assert results == [INVALID_METRIC_ID]
    assert len(leftover) == 2


def test_request_timeout_returns_sentinel():
    ch = CommandChannel()
    assert ch.request("nobody", MetricKind.INT8, "", timeout=0.01) == INVALID_METRIC_ID
