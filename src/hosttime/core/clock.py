# src/hosttime/core/clock.py
"""Clock and host timer service abstraction.

The timer primitives never touch ambient time or timer APIs directly. They
talk to a TimerHost through a Clock, which is injected (or defaults to
DEFAULT_CLOCK). This keeps every timing path deterministic under test.

Implementations of TimerHost:
- AsyncioTimerHost: time.monotonic_ns()/time.time_ns() and the running
  asyncio loop's call_later() (production)
- MockTimerHost: controllable time and a recorded callback table (testing,
  see hosttime.testing)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from hosttime.contracts.errors import HostContractError, TimeOverflowError
from hosttime.contracts.time import TimePoint, WallTime

if TYPE_CHECKING:
    from hosttime.core.config import TimerSettings


# Hosts take the delay as a signed 32-bit millisecond count.
HOST_MAX_DELAY_MS = 2**31 - 1


class TimerHost(Protocol):
    """Host clock and callback timer service.

    Implementations:
    - AsyncioTimerHost (production)
    - MockTimerHost (testing)
    """

    def monotonic_micros(self) -> int:
        """Return a non-decreasing microsecond counter with arbitrary origin."""
        ...

    def wall_micros(self) -> int:
        """Return microseconds since the Unix epoch."""
        ...

    def schedule_callback(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Invoke `callback` asynchronously, no earlier than `delay_ms` from now.

        Returns:
            Opaque handle accepted by cancel_callback()
        """
        ...

    def cancel_callback(self, handle: Any) -> None:
        """Cancel a scheduled callback.

        Idempotent: cancelling a handle that already fired or is unknown is
        a no-op, not an error.
        """
        ...


class AsyncioTimerHost:
    """Production host backed by the running asyncio event loop.

    schedule_callback() must be called from a coroutine or callback running
    on the loop; there is exactly one scheduler and no cross-thread use.
    """

    def monotonic_micros(self) -> int:
        return time.monotonic_ns() // 1000

    def wall_micros(self) -> int:
        return time.time_ns() // 1000

    def schedule_callback(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, callback)

    def cancel_callback(self, handle: asyncio.TimerHandle) -> None:
        # TimerHandle.cancel() is already a no-op once run or cancelled
        handle.cancel()


class Clock:
    """Typed view of a TimerHost.

    Converts raw host counters into TimePoint/WallTime and guards the host's
    callback table: delays are validated against the host limit, and host
    failures surface as HostContractError.

    Example:
        clock = Clock(MockTimerHost())
        deadline = clock.now() + timedelta(seconds=1)
        await sleep_until(deadline, clock=clock)
    """

    def __init__(self, host: TimerHost, *, max_delay_ms: int = HOST_MAX_DELAY_MS) -> None:
        """Initialize clock over a host.

        Args:
            host: Host clock and timer service
            max_delay_ms: Largest delay the host accepts (default: i32 max)

        Raises:
            ValueError: If max_delay_ms is not positive
        """
        if max_delay_ms <= 0:
            raise ValueError(f"max_delay_ms must be positive, got {max_delay_ms}")
        self._host = host
        self._max_delay_ms = max_delay_ms

    @classmethod
    def from_settings(cls, settings: TimerSettings, host: TimerHost | None = None) -> Clock:
        """Factory from TimerSettings config model.

        Args:
            settings: Validated Pydantic settings model
            host: Host to wrap (default: AsyncioTimerHost)
        """
        return cls(host or AsyncioTimerHost(), max_delay_ms=settings.max_host_delay_ms)

    @property
    def host(self) -> TimerHost:
        return self._host

    @property
    def max_delay_ms(self) -> int:
        return self._max_delay_ms

    def now(self) -> TimePoint:
        """Current monotonic time."""
        return TimePoint.from_raw_us(self._host.monotonic_micros())

    def wall_now(self) -> WallTime:
        """Current wall-clock time."""
        return WallTime.from_raw_us(self._host.wall_micros())

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Register a host callback.

        Args:
            delay_ms: Delay in whole milliseconds
            callback: Called once by the host when the delay has passed

        Returns:
            Host handle for cancel()

        Raises:
            TimeOverflowError: If delay_ms is outside [0, max_delay_ms]
            HostContractError: If the host fails to register the callback
        """
        if not 0 <= delay_ms <= self._max_delay_ms:
            raise TimeOverflowError(f"host delay {delay_ms}ms outside supported range [0, {self._max_delay_ms}]")
        try:
            return self._host.schedule_callback(delay_ms, callback)
        except Exception as e:
            raise HostContractError(f"host failed to schedule callback: {e}") from e

    def cancel(self, handle: Any) -> None:
        """Deregister a host callback.

        Raises:
            HostContractError: If the host fails to cancel the callback
        """
        try:
            self._host.cancel_callback(handle)
        except Exception as e:
            raise HostContractError(f"host failed to cancel callback: {e}") from e


# Default clock for production use
DEFAULT_CLOCK: Clock = Clock(AsyncioTimerHost())
