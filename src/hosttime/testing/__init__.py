# src/hosttime/testing/__init__.py
"""Test infrastructure for code built on hosttime.

- MockTimerHost: deterministic host clock and recorded callback table
- RecordingWaker: waker that counts how often it was called, for driving
  poll() by hand
- mock_clock(): Clock over a fresh MockTimerHost

Usage:
    from hosttime.testing import RecordingWaker, mock_clock

    clock, host = mock_clock()
    waker = RecordingWaker()
    delay = sleep(timedelta(seconds=1), clock=clock)

    assert delay.poll(waker).is_pending
    host.advance(timedelta(seconds=1))
    assert waker.calls == 1
    assert delay.poll(waker).is_ready
"""

from __future__ import annotations

from hosttime.core.clock import Clock
from hosttime.testing.mock_host import DEFAULT_WALL_START_US, MockTimerHost, ScheduledCallback


class RecordingWaker:
    """Callable waker that records each wake-up."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1

    @property
    def woken(self) -> bool:
        return self.calls > 0


def mock_clock(start_us: int = 0, wall_start_us: int = DEFAULT_WALL_START_US) -> tuple[Clock, MockTimerHost]:
    """Create a Clock over a fresh MockTimerHost.

    Returns:
        (clock, host) pair; drive time through host.advance()
    """
    host = MockTimerHost(start_us=start_us, wall_start_us=wall_start_us)
    return Clock(host), host


__all__ = [
    "DEFAULT_WALL_START_US",
    "MockTimerHost",
    "RecordingWaker",
    "ScheduledCallback",
    "mock_clock",
]
