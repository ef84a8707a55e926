# src/hosttime/engine/sleep.py
"""Sleep: a deferred completion driven by the host timer service.

A Sleep becomes ready no earlier than its deadline. It holds at most one
host callback registration, created lazily on the first poll that finds the
deadline still in the future. A deadline that has already passed at first
poll resolves immediately without touching the host.

Registration lifecycle (RegistrationState):

    UNREGISTERED --poll, deadline ahead--> REGISTERED --host fires--> FIRED
         ^                                     |
         +-------- cancel (reset/close) -------+

Cancellation only reaches the host from REGISTERED. Once FIRED there is
nothing to release, so cancelling again is a no-op.

Every exit path releases the registration synchronously: reset(), close(),
leaving a `with` block, and the end of an `await` (normal completion or
cancellation of the awaiting task). Nothing is left to garbage collection,
so an abandoned callback can never fire into torn-down state.
"""

from __future__ import annotations

from collections.abc import Generator
from types import TracebackType
from typing import Any

from hosttime.contracts.enums import RegistrationState
from hosttime.contracts.poll import Poll, Waker
from hosttime.contracts.time import DurationLike, TimePoint
from hosttime.core.clock import DEFAULT_CLOCK, Clock
from hosttime.core.logging import get_logger
from hosttime.engine.driver import wait_ready

logger = get_logger(__name__)


class HostRegistration:
    """Exclusively owned host callback registration.

    Holds the host handle, the registration state and the waker to call
    when the host fires. Created already REGISTERED; it never goes back to
    REGISTERED once it leaves that state.
    """

    def __init__(self, clock: Clock, delay_ms: int, waker: Waker) -> None:
        """Register a callback with the host.

        Args:
            clock: Clock wrapping the host timer service
            delay_ms: Host delay in whole milliseconds
            waker: Called once when the host fires

        Raises:
            TimeOverflowError: If delay_ms exceeds the host's limit
            HostContractError: If the host fails to register the callback
        """
        self._clock = clock
        self._waker: Waker | None = waker
        self._state = RegistrationState.REGISTERED
        self._handle: Any = None
        try:
            self._handle = clock.schedule(delay_ms, self._fire)
        except Exception:
            self._state = RegistrationState.UNREGISTERED
            self._waker = None
            raise

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def fired(self) -> bool:
        return self._state is RegistrationState.FIRED

    @property
    def handle(self) -> Any:
        return self._handle

    def set_waker(self, waker: Waker) -> None:
        """Replace the waker called on fire (latest poll wins)."""
        if self._state is RegistrationState.REGISTERED:
            self._waker = waker

    def _fire(self) -> None:
        if self._state is not RegistrationState.REGISTERED:
            # Host delivered a callback we already cancelled
            return
        self._state = RegistrationState.FIRED
        logger.debug("Host callback fired", handle=self._handle)
        waker, self._waker = self._waker, None
        if waker is not None:
            waker()

    def cancel(self) -> bool:
        """Deregister from the host if still REGISTERED.

        Returns:
            True if a host cancellation was issued
        """
        if self._state is not RegistrationState.REGISTERED:
            return False
        self._state = RegistrationState.UNREGISTERED
        self._waker = None
        self._clock.cancel(self._handle)
        return True


class Sleep:
    """Future that completes once the clock reaches `deadline`.

    Example:
        with sleep(timedelta(milliseconds=500), clock=clock) as delay:
            await delay

        # Or simply:
        await sleep(0.5)
    """

    def __init__(self, deadline: TimePoint, *, clock: Clock | None = None) -> None:
        self._deadline = deadline
        self._clock = clock or DEFAULT_CLOCK
        self._registration: HostRegistration | None = None

    def __repr__(self) -> str:
        return f"Sleep(deadline={self._deadline!r}, state={self.state.value})"

    @property
    def deadline(self) -> TimePoint:
        return self._deadline

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def state(self) -> RegistrationState:
        if self._registration is None:
            return RegistrationState.UNREGISTERED
        return self._registration.state

    def is_elapsed(self) -> bool:
        """True if the host fired or the clock has reached the deadline."""
        if self._registration is not None and self._registration.fired:
            return True
        return self._clock.now() >= self._deadline

    def poll(self, waker: Waker) -> Poll[None]:
        """Attempt to complete.

        Args:
            waker: Called when the host fires, if this poll returns pending

        Returns:
            Poll.ready(None) once the deadline is reached, else Poll.pending()

        Raises:
            TimeOverflowError: If the remaining delay exceeds the host's limit
            HostContractError: If the host fails to register the callback
        """
        if self._registration is None:
            now = self._clock.now()
            if now >= self._deadline:
                return Poll.ready(None)

            # Round up: a truncated delay could let the host fire before the deadline
            remaining_us = self._deadline.raw_us - now.raw_us
            delay_ms = -(-remaining_us // 1000)
            self._registration = HostRegistration(self._clock, delay_ms, waker)
            logger.debug(
                "Registered host callback",
                deadline_us=self._deadline.raw_us,
                delay_ms=delay_ms,
            )
        else:
            self._registration.set_waker(waker)

        if self._registration.fired:
            return Poll.ready(None)
        return Poll.pending()

    def reset(self, deadline: TimePoint) -> None:
        """Move the deadline, releasing any live registration.

        The next poll() registers again lazily.
        """
        self._cancel()
        self._deadline = deadline

    def close(self) -> None:
        """Release the host registration, if any. Safe to call repeatedly."""
        self._cancel()

    def _cancel(self) -> None:
        registration, self._registration = self._registration, None
        if registration is not None and registration.cancel():
            logger.debug("Cancelled host callback", deadline_us=self._deadline.raw_us)

    def __enter__(self) -> Sleep:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __await__(self) -> Generator[Any, None, None]:
        return wait_ready(self.poll, on_exit=self.close).__await__()


def sleep_until(deadline: TimePoint, *, clock: Clock | None = None) -> Sleep:
    """Sleep until `deadline`."""
    return Sleep(deadline, clock=clock)


def sleep(duration: DurationLike, *, clock: Clock | None = None) -> Sleep:
    """Sleep for `duration` (timedelta, or seconds as int/float) from now."""
    clock = clock or DEFAULT_CLOCK
    return Sleep(clock.now() + duration, clock=clock)
