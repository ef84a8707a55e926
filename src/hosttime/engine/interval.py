# src/hosttime/engine/interval.py
"""Interval: periodic ticks over a single reused Sleep.

The embedded Sleep's deadline is always the next *scheduled* tick. tick()
reports that scheduled time, never the time the tick was observed, and the
MissedTickBehavior decides where the following tick lands when the consumer
falls behind:

    period = 1s, first tick at t0, consumer stalls until t0+2.5s

    BURST: t0+1, t0+2 ready immediately, then t0+3 (on the original grid)
    DELAY: t0+1 ready immediately, then t0+3.5 (grid restarts from t0+2.5)
    SKIP:  t0+1 ready immediately, then t0+3 (next grid point after t0+2.5)

BURST has no cap on how many immediate ticks it emits. A consumer that is
far behind receives every missed tick back-to-back.
"""

from __future__ import annotations

from datetime import timedelta
from types import TracebackType

from hosttime.contracts.enums import MissedTickBehavior
from hosttime.contracts.poll import Poll, Waker
from hosttime.contracts.time import DurationLike, TimePoint, as_duration
from hosttime.core.clock import DEFAULT_CLOCK, Clock
from hosttime.core.logging import get_logger
from hosttime.engine.driver import wait_ready
from hosttime.engine.sleep import Sleep

logger = get_logger(__name__)


class Interval:
    """Periodic tick source.

    An abandoned tick() keeps its host registration so the next tick() can
    resume against the same deadline. close(), or leaving a `with` block, is
    the only way to release that registration.

    Example:
        with interval(timedelta(seconds=1), clock=clock) as ticks:
            while True:
                scheduled = await ticks.tick()
                refresh(scheduled)
    """

    def __init__(
        self,
        start: TimePoint,
        period: DurationLike,
        *,
        clock: Clock | None = None,
        missed_tick_behavior: MissedTickBehavior | str | None = None,
    ) -> None:
        """Initialize interval.

        Args:
            start: Time of the first tick
            period: Time between ticks (must be positive)
            clock: Clock to schedule against (default: DEFAULT_CLOCK)
            missed_tick_behavior: Catch-up policy (default: BURST)

        Raises:
            ValueError: If period is zero or negative, or the policy is unknown
        """
        period = as_duration(period)
        if period <= timedelta(0):
            raise ValueError(f"Interval period must be positive, got {period}")

        self._clock = clock or DEFAULT_CLOCK
        self._sleep = Sleep(start, clock=self._clock)
        self._period = period
        self._missed_tick_behavior = (
            MissedTickBehavior.BURST if missed_tick_behavior is None else MissedTickBehavior(missed_tick_behavior)
        )

    def __repr__(self) -> str:
        return (
            f"Interval(period={self._period!r}, next={self._sleep.deadline!r}, "
            f"missed_tick_behavior={self._missed_tick_behavior.value})"
        )

    @property
    def period(self) -> timedelta:
        return self._period

    @property
    def next_deadline(self) -> TimePoint:
        """Scheduled time of the next tick."""
        return self._sleep.deadline

    @property
    def missed_tick_behavior(self) -> MissedTickBehavior:
        return self._missed_tick_behavior

    @missed_tick_behavior.setter
    def missed_tick_behavior(self, behavior: MissedTickBehavior | str) -> None:
        # Applies from the next tick computation; the pending deadline stays
        self._missed_tick_behavior = MissedTickBehavior(behavior)

    def set_missed_tick_behavior(self, behavior: MissedTickBehavior | str) -> None:
        self.missed_tick_behavior = behavior

    async def tick(self) -> TimePoint:
        """Wait for the next tick and return its scheduled time.

        Abandoning the wait does not lose the tick: the next call to tick()
        resumes against the same deadline.
        """
        return await wait_ready(self.poll_tick)

    def poll_tick(self, waker: Waker) -> Poll[TimePoint]:
        """Attempt to complete the next tick.

        Returns:
            Poll.ready(scheduled time of the tick), or Poll.pending()
        """
        if self._sleep.poll(waker).is_pending:
            return Poll.pending()

        scheduled = self._sleep.deadline
        # A host callback can run marginally before our clock reads the deadline
        now = max(self._clock.now(), scheduled)
        next_deadline = self._missed_tick_behavior.next_deadline(scheduled, now, self._period)
        if next_deadline <= now:
            logger.debug(
                "Interval behind schedule",
                scheduled_us=scheduled.raw_us,
                now_us=now.raw_us,
                next_us=next_deadline.raw_us,
                missed_tick_behavior=self._missed_tick_behavior.value,
            )
        self._sleep.reset(next_deadline)
        return Poll.ready(scheduled)

    def reset(self) -> None:
        """Restart the schedule: the next tick is one period from now."""
        self._sleep.reset(self._clock.now() + self._period)

    def close(self) -> None:
        """Release the pending host registration, if any."""
        self._sleep.close()

    def __enter__(self) -> Interval:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def interval_at(
    start: TimePoint,
    period: DurationLike,
    *,
    clock: Clock | None = None,
    missed_tick_behavior: MissedTickBehavior | str | None = None,
) -> Interval:
    """Create an interval whose first tick is at `start`."""
    return Interval(start, period, clock=clock, missed_tick_behavior=missed_tick_behavior)


def interval(
    period: DurationLike,
    *,
    clock: Clock | None = None,
    missed_tick_behavior: MissedTickBehavior | str | None = None,
) -> Interval:
    """Create an interval whose first tick completes immediately."""
    clock = clock or DEFAULT_CLOCK
    return interval_at(clock.now(), period, clock=clock, missed_tick_behavior=missed_tick_behavior)
