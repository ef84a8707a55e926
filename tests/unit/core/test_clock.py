# tests/unit/core/test_clock.py
"""Tests for the Clock abstraction (AsyncioTimerHost, Clock, DEFAULT_CLOCK).

Clock is the only path from the timer primitives to the host: it converts
raw counters to TimePoint/WallTime, enforces the host delay limit, and
turns host failures into HostContractError.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

import pytest


class _FailingHost:
    """Host whose timer service rejects every call."""

    def monotonic_micros(self) -> int:
        return 0

    def wall_micros(self) -> int:
        return 0

    def schedule_callback(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        raise OSError("timer table full")

    def cancel_callback(self, handle: Any) -> None:
        raise OSError("unknown handle")


class TestAsyncioTimerHost:
    """Tests for the production host backed by the asyncio loop."""

    def test_monotonic_micros_is_non_decreasing(self) -> None:
        from hosttime.core.clock import AsyncioTimerHost

        host = AsyncioTimerHost()
        first = host.monotonic_micros()
        second = host.monotonic_micros()
        assert second >= first

    def test_wall_micros_tracks_system_time(self) -> None:
        """wall_micros() agrees with time.time() to within a second."""
        from hosttime.core.clock import AsyncioTimerHost

        host = AsyncioTimerHost()
        assert abs(host.wall_micros() - time.time() * 1_000_000) < 1_000_000

    def test_schedule_requires_running_loop(self) -> None:
        from hosttime.core.clock import AsyncioTimerHost

        with pytest.raises(RuntimeError):
            AsyncioTimerHost().schedule_callback(10, lambda: None)

    @pytest.mark.asyncio
    async def test_scheduled_callback_runs(self) -> None:
        from hosttime.core.clock import AsyncioTimerHost

        host = AsyncioTimerHost()
        fired = asyncio.Event()
        host.schedule_callback(1, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_cancelled_callback_does_not_run(self) -> None:
        from hosttime.core.clock import AsyncioTimerHost

        host = AsyncioTimerHost()
        calls: list[int] = []
        handle = host.schedule_callback(1, lambda: calls.append(1))
        host.cancel_callback(handle)
        # Second cancel is a no-op
        host.cancel_callback(handle)
        await asyncio.sleep(0.02)
        assert calls == []


class TestClock:
    """Tests for the Clock wrapper."""

    def test_now_and_wall_now_convert_host_counters(self) -> None:
        from hosttime.contracts.time import TimePoint, WallTime
        from hosttime.core.clock import Clock
        from hosttime.testing import MockTimerHost

        clock = Clock(MockTimerHost(start_us=1_500, wall_start_us=9_000))
        assert clock.now() == TimePoint(1_500)
        assert clock.wall_now() == WallTime(9_000)

    def test_schedule_passes_through_to_host(self) -> None:
        from hosttime.core.clock import Clock
        from hosttime.testing import MockTimerHost

        host = MockTimerHost()
        handle = Clock(host).schedule(250, lambda: None)

        assert host.registrations[0].handle == handle
        assert host.registrations[0].delay_ms == 250

    def test_zero_delay_is_allowed(self) -> None:
        from hosttime.core.clock import Clock
        from hosttime.testing import MockTimerHost

        host = MockTimerHost()
        Clock(host).schedule(0, lambda: None)
        assert host.pending_count == 1

    def test_delay_above_host_limit_raises_overflow(self) -> None:
        """A delay the host cannot represent is rejected before reaching it."""
        from hosttime.contracts.errors import TimeOverflowError
        from hosttime.core.clock import HOST_MAX_DELAY_MS, Clock
        from hosttime.testing import MockTimerHost

        host = MockTimerHost()
        clock = Clock(host)
        clock.schedule(HOST_MAX_DELAY_MS, lambda: None)
        with pytest.raises(TimeOverflowError):
            clock.schedule(HOST_MAX_DELAY_MS + 1, lambda: None)
        assert len(host.registrations) == 1

    def test_negative_delay_raises_overflow(self) -> None:
        from hosttime.contracts.errors import TimeOverflowError
        from hosttime.core.clock import Clock
        from hosttime.testing import MockTimerHost

        with pytest.raises(TimeOverflowError):
            Clock(MockTimerHost()).schedule(-1, lambda: None)

    def test_custom_max_delay(self) -> None:
        from hosttime.contracts.errors import TimeOverflowError
        from hosttime.core.clock import Clock
        from hosttime.testing import MockTimerHost

        clock = Clock(MockTimerHost(), max_delay_ms=1_000)
        assert clock.max_delay_ms == 1_000
        with pytest.raises(TimeOverflowError):
            clock.schedule(1_001, lambda: None)

    def test_non_positive_max_delay_rejected(self) -> None:
        from hosttime.core.clock import Clock
        from hosttime.testing import MockTimerHost

        with pytest.raises(ValueError, match="max_delay_ms"):
            Clock(MockTimerHost(), max_delay_ms=0)

    def test_host_schedule_failure_wrapped(self) -> None:
        from hosttime.contracts.errors import HostContractError
        from hosttime.core.clock import Clock

        with pytest.raises(HostContractError, match="timer table full") as exc_info:
            Clock(_FailingHost()).schedule(10, lambda: None)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_host_cancel_failure_wrapped(self) -> None:
        from hosttime.contracts.errors import HostContractError
        from hosttime.core.clock import Clock

        with pytest.raises(HostContractError, match="unknown handle"):
            Clock(_FailingHost()).cancel(7)

    def test_from_settings(self) -> None:
        from hosttime.core.clock import Clock
        from hosttime.core.config import TimerSettings
        from hosttime.testing import MockTimerHost

        host = MockTimerHost()
        clock = Clock.from_settings(TimerSettings(max_host_delay_ms=5_000), host=host)

        assert clock.host is host
        assert clock.max_delay_ms == 5_000

    def test_from_settings_defaults_to_asyncio_host(self) -> None:
        from hosttime.core.clock import AsyncioTimerHost, Clock
        from hosttime.core.config import TimerSettings

        assert isinstance(Clock.from_settings(TimerSettings()).host, AsyncioTimerHost)

    def test_default_clock_uses_asyncio_host(self) -> None:
        from hosttime.core.clock import DEFAULT_CLOCK, AsyncioTimerHost

        assert isinstance(DEFAULT_CLOCK.host, AsyncioTimerHost)
