"""Modes and states used across subsystem boundaries."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import timedelta

    from hosttime.contracts.time import TimePoint


class RegistrationState(StrEnum):
    """Lifecycle of a single host callback registration.

    cancel() is only meaningful from REGISTERED. Once FIRED there is nothing
    left to release, so cancelling is a no-op.
    """

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    FIRED = "fired"


class MissedTickBehavior(StrEnum):
    """How an Interval catches up after ticks were missed.

    - BURST: fire missed ticks back-to-back until the original cadence is
      reached again. There is no cap on the burst length.
    - DELAY: drop missed ticks, restart the cadence from the time the late
      tick was observed.
    - SKIP: drop missed ticks, stay on the original grid.
    """

    BURST = "burst"
    DELAY = "delay"
    SKIP = "skip"

    def next_deadline(self, scheduled: TimePoint, now: TimePoint, period: timedelta) -> TimePoint:
        """Compute the next scheduled tick after `scheduled` was observed at `now`.

        Args:
            scheduled: Logical time of the tick that just completed
            now: Time at which the tick was observed (never before `scheduled`)
            period: Interval period (strictly positive)

        Returns:
            Deadline of the next tick
        """
        # Lazy import keeps contracts.enums importable without contracts.time
        from hosttime.contracts.time import TimePoint, duration_to_micros

        if self is MissedTickBehavior.BURST:
            return scheduled + period
        if self is MissedTickBehavior.DELAY:
            return now + period

        period_us = duration_to_micros(period)
        now_us = now.raw_us
        behind_us = now_us - scheduled.raw_us
        return TimePoint.from_raw_us(now_us + period_us - (behind_us % period_us))
