"""Tests for the throttle gate."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from pyonedrive import MalformedThrottleHeaderError, RateLimitedError, ThrottleGate
from pyonedrive.throttle import parse_retry_after

if TYPE_CHECKING:
    from conftest import FrozenClock


class TestParseRetryAfter:
    """Tests for Retry-After parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("3600", 3600), (" 5 ", 5), ("0", 0), (120, 120)],
    )
    def test_valid_values(self, value: str | int, expected: int) -> None:
        assert parse_retry_after(value) == expected

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "soon",
            "1.5",
            "-3",
            -3,
            "Wed, 21 Oct 2015 07:28:00 GMT",
            True,
            "²",
            "٣",
        ],
    )
    def test_invalid_values(self, value: object) -> None:
        with pytest.raises(MalformedThrottleHeaderError) as exc_info:
            parse_retry_after(value)  # type: ignore[arg-type]
        assert exc_info.value.value == value


class TestThrottleGate:
    """Tests for admitting and throttling requests."""

    def test_new_gate_admits(self, clock: FrozenClock) -> None:
        """Test a fresh gate admits requests immediately."""
        gate = ThrottleGate(clock=clock)
        assert gate.next_allowed == clock.now
        gate.check_and_admit()
        assert gate.remaining() == timedelta(0)

    def test_refuses_until_retry_after_elapses(self, clock: FrozenClock) -> None:
        gate = ThrottleGate(clock=clock)
        gate.record_throttle("3600")

        with pytest.raises(RateLimitedError) as exc_info:
            gate.check_and_admit()
        assert exc_info.value.retry_after == timedelta(seconds=3600)

        clock.advance(3599)
        with pytest.raises(RateLimitedError) as exc_info:
            gate.check_and_admit()
        assert exc_info.value.retry_after == timedelta(seconds=1)
        assert gate.remaining() == timedelta(seconds=1)

        clock.advance(1)
        gate.check_and_admit()

    def test_record_throttle_sets_next_allowed(self, clock: FrozenClock) -> None:
        gate = ThrottleGate(clock=clock)
        next_allowed = gate.record_throttle(30, now=clock.now)
        assert next_allowed == clock.now + timedelta(seconds=30)
        assert gate.next_allowed == next_allowed

    def test_record_throttle_is_idempotent(self, clock: FrozenClock) -> None:
        """Test repeating the same throttle input gives the same state."""
        gate = ThrottleGate(clock=clock)
        first = gate.record_throttle("60", now=clock.now)
        second = gate.record_throttle("60", now=clock.now)
        assert first == second
        assert gate.next_allowed == clock.now + timedelta(seconds=60)

    def test_malformed_value_leaves_gate_unchanged(self, clock: FrozenClock) -> None:
        gate = ThrottleGate(clock=clock)
        gate.record_throttle("10")
        before = gate.next_allowed

        with pytest.raises(MalformedThrottleHeaderError):
            gate.record_throttle("later")

        assert gate.next_allowed == before

    def test_explicit_now_overrides_clock(self, clock: FrozenClock) -> None:
        gate = ThrottleGate(clock=clock)
        gate.record_throttle("10")
        gate.check_and_admit(now=clock.now + timedelta(seconds=10))
        with pytest.raises(RateLimitedError):
            gate.check_and_admit(now=clock.now + timedelta(seconds=9))

    def test_concurrent_updates_are_not_lost(self, clock: FrozenClock) -> None:
        """Test threads recording the same throttle agree on the result."""
        gate = ThrottleGate(clock=clock)
        results: list = []

        def worker() -> None:
            results.append(gate.record_throttle("42", now=clock.now))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1
        assert gate.next_allowed == clock.now + timedelta(seconds=42)
