from __future__ import annotations

import pytest

from price_compare.utils.ratelimit import RequestGate


def test_31st_request_in_window_is_rejected(clock):
    gate = RequestGate(max_requests=30, window=60, clock=clock)
    for _ in range(30):
        assert gate.admit("10.0.0.1")
        clock.advance(1)
    assert not gate.admit("10.0.0.1")


def test_other_identity_is_admitted_in_same_window(clock):
    gate = RequestGate(max_requests=30, window=60, clock=clock)
    for _ in range(30):
        gate.admit("10.0.0.1")
    assert not gate.admit("10.0.0.1")
    assert gate.admit("10.0.0.2")


def test_window_rolls_forward(clock):
    gate = RequestGate(max_requests=2, window=60, clock=clock)
    assert gate.admit("a")
    clock.advance(30)
    assert gate.admit("a")
    assert not gate.admit("a")

    clock.advance(30)  # first hit is now 60s old
    assert gate.admit("a")
    assert not gate.admit("a")


def test_rejections_do_not_extend_the_window(clock):
    gate = RequestGate(max_requests=1, window=10, clock=clock)
    assert gate.admit("a")
    for _ in range(5):
        clock.advance(1)
        assert not gate.admit("a")
    clock.advance(5)
    assert gate.admit("a")


def test_retry_after(clock):
    gate = RequestGate(max_requests=1, window=60, clock=clock)
    assert gate.retry_after("a") == 0.0
    gate.admit("a")
    clock.advance(20)
    assert gate.retry_after("a") == pytest.approx(40.0)


@pytest.mark.parametrize("kwargs", [{"max_requests": 0}, {"window": 0}])
def test_rejects_bad_limits(kwargs):
    with pytest.raises(ValueError):
        RequestGate(**kwargs)


def test_idle_identities_are_swept(clock):
    gate = RequestGate(max_requests=30, window=60, clock=clock)
    for i in range(1000):
        assert gate.admit(f"10.0.{i // 256}.{i % 256}")

    clock.advance(3600)
    assert gate.admit("192.0.2.1")
    assert len(gate) == 1


def test_sweep_keeps_identities_still_in_window(clock):
    gate = RequestGate(max_requests=1, window=60, clock=clock)
    gate.admit("old")
    clock.advance(50)
    gate.admit("recent")
    clock.advance(15)  # "old" is idle, "recent" hit 15s ago

    assert gate.admit("new")
    assert len(gate) == 2
    assert not gate.admit("recent")
