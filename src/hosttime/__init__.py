"""
hosttime: timers, intervals and timeouts over a callback-based host timer.

For environments with no thread-blocking timer, where waiting must be
arranged through a host-provided "call me back in N ms" service and a host
clock. Every primitive is poll-driven and also awaitable from asyncio.

Example:
    from datetime import timedelta
    from hosttime import interval, sleep, timeout

    async def main() -> None:
        await sleep(timedelta(milliseconds=500))

        ticks = interval(timedelta(seconds=1))
        await ticks.tick()  # completes immediately
        await ticks.tick()  # one second later

        result = await timeout(timedelta(milliseconds=200), slow_call())
        if result.is_elapsed:
            print("timeout")
"""

from hosttime.contracts import (
    UNIX_EPOCH,
    Elapsed,
    HostContractError,
    MissedTickBehavior,
    NegativeDurationError,
    Poll,
    Pollable,
    RegistrationState,
    TimeOverflowError,
    TimePoint,
    TimeoutResult,
    WallTime,
)
from hosttime.core.clock import DEFAULT_CLOCK, AsyncioTimerHost, Clock, TimerHost
from hosttime.engine.interval import Interval, interval, interval_at
from hosttime.engine.sleep import Sleep, sleep, sleep_until
from hosttime.engine.timeout import Timeout, timeout, timeout_at

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CLOCK",
    "UNIX_EPOCH",
    "AsyncioTimerHost",
    "Clock",
    "Elapsed",
    "HostContractError",
    "Interval",
    "MissedTickBehavior",
    "NegativeDurationError",
    "Poll",
    "Pollable",
    "RegistrationState",
    "Sleep",
    "TimeOverflowError",
    "TimePoint",
    "Timeout",
    "TimeoutResult",
    "TimerHost",
    "WallTime",
    "interval",
    "interval_at",
    "sleep",
    "sleep_until",
    "timeout",
    "timeout_at",
]
