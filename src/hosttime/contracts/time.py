# src/hosttime/contracts/time.py
"""Time point value types.

TimePoint and WallTime both wrap an unsigned 64-bit microsecond count:

- TimePoint: monotonic, arbitrary origin. Used for scheduling and ordering.
- WallTime: microseconds since the Unix epoch. May jump when the host wall
  clock is adjusted, so it is never used for scheduling.

Durations are datetime.timedelta (microsecond resolution). Functions that
accept a duration also accept non-negative int/float seconds.

Arithmetic never wraps. Operators raise TimeOverflowError when the result
leaves the 64-bit range; checked_add()/checked_sub() return None instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, ClassVar, Self

from hosttime.contracts.errors import NegativeDurationError, TimeOverflowError

if TYPE_CHECKING:
    from hosttime.core.clock import Clock

MAX_RAW_US = 2**64 - 1

type DurationLike = timedelta | int | float


def duration_to_micros(duration: DurationLike) -> int:
    """Convert a duration to a whole number of microseconds.

    Args:
        duration: timedelta, or seconds as int/float

    Returns:
        Microseconds (non-negative)

    Raises:
        TypeError: If duration is not a timedelta or a number
        ValueError: If duration is negative or not finite
    """
    if isinstance(duration, timedelta):
        micros = duration // timedelta(microseconds=1)
    elif isinstance(duration, bool) or not isinstance(duration, int | float):
        raise TypeError(f"duration must be a timedelta or seconds as int/float, got {type(duration).__name__}")
    elif isinstance(duration, float) and not math.isfinite(duration):
        raise ValueError(f"duration must be finite, got {duration}")
    elif isinstance(duration, int):
        micros = duration * 1_000_000
    else:
        micros = round(duration * 1_000_000)

    if micros < 0:
        raise ValueError(f"duration must be non-negative, got {duration!r}")
    return micros


def micros_to_duration(micros: int) -> timedelta:
    """Convert a microsecond count to a timedelta."""
    return timedelta(microseconds=micros)


def as_duration(duration: DurationLike) -> timedelta:
    """Normalize a duration-like value to a non-negative timedelta."""
    return micros_to_duration(duration_to_micros(duration))


@dataclass(frozen=True, order=True, slots=True)
class _MicrosecondTime:
    """Shared representation and Duration arithmetic for TimePoint/WallTime."""

    raw_us: int

    def __post_init__(self) -> None:
        if isinstance(self.raw_us, bool) or not isinstance(self.raw_us, int):
            raise TypeError(f"raw_us must be an int, got {type(self.raw_us).__name__}")
        if not 0 <= self.raw_us <= MAX_RAW_US:
            raise TimeOverflowError(f"{type(self).__name__} out of range: {self.raw_us}us")

    @classmethod
    def from_raw_us(cls, us: int) -> Self:
        return cls(us)

    def checked_add(self, duration: DurationLike) -> Self | None:
        """Return self + duration, or None if the result is out of range."""
        result = self.raw_us + duration_to_micros(duration)
        if result > MAX_RAW_US:
            return None
        return type(self)(result)

    def checked_sub(self, duration: DurationLike) -> Self | None:
        """Return self - duration, or None if the result is out of range."""
        result = self.raw_us - duration_to_micros(duration)
        if result < 0:
            return None
        return type(self)(result)

    def __add__(self, other: DurationLike) -> Self:
        if not isinstance(other, timedelta | int | float):
            return NotImplemented
        result = self.checked_add(other)
        if result is None:
            raise TimeOverflowError(f"overflow when adding duration to {type(self).__name__}")
        return result

    __radd__ = __add__

    def _sub_duration(self, other: DurationLike) -> Self:
        result = self.checked_sub(other)
        if result is None:
            raise TimeOverflowError(f"overflow when subtracting duration from {type(self).__name__}")
        return result


@dataclass(frozen=True, order=True, slots=True)
class TimePoint(_MicrosecondTime):
    """Monotonic time point with microsecond resolution.

    Example:
        deadline = TimePoint.now(clock) + timedelta(milliseconds=200)
        remaining = deadline - TimePoint.now(clock)
    """

    @classmethod
    def now(cls, clock: Clock | None = None) -> TimePoint:
        """Read the current monotonic time from `clock` (default clock if None)."""
        from hosttime.core.clock import DEFAULT_CLOCK

        return (clock or DEFAULT_CLOCK).now()

    def duration_since(self, earlier: TimePoint) -> timedelta:
        """Time elapsed from `earlier` to self, or zero if `earlier` is later."""
        return self.saturating_duration_since(earlier)

    def checked_duration_since(self, earlier: TimePoint) -> timedelta | None:
        """Time elapsed from `earlier` to self, or None if `earlier` is later."""
        if earlier.raw_us > self.raw_us:
            return None
        return micros_to_duration(self.raw_us - earlier.raw_us)

    def saturating_duration_since(self, earlier: TimePoint) -> timedelta:
        """Time elapsed from `earlier` to self, clamped to zero."""
        return self.checked_duration_since(earlier) or timedelta(0)

    def elapsed(self, clock: Clock | None = None) -> timedelta:
        """Time elapsed since self, measured against the clock's current time."""
        return TimePoint.now(clock) - self

    def __sub__(self, other: TimePoint | DurationLike) -> timedelta | TimePoint:
        if isinstance(other, TimePoint):
            return self.duration_since(other)
        if not isinstance(other, timedelta | int | float):
            return NotImplemented
        return self._sub_duration(other)


@dataclass(frozen=True, order=True, slots=True)
class WallTime(_MicrosecondTime):
    """Wall-clock time as microseconds since the Unix epoch.

    duration_since() never clamps: it raises NegativeDurationError when the
    argument is later than self. Use saturating_duration_since() for a
    non-failing variant.
    """

    UNIX_EPOCH: ClassVar[WallTime]

    @classmethod
    def now(cls, clock: Clock | None = None) -> WallTime:
        """Read the current wall time from `clock` (default clock if None)."""
        from hosttime.core.clock import DEFAULT_CLOCK

        return (clock or DEFAULT_CLOCK).wall_now()

    def duration_since(self, earlier: WallTime) -> timedelta:
        """Time elapsed from `earlier` to self.

        Raises:
            NegativeDurationError: If `earlier` is later than self. The error's
                duration is `earlier - self`.
        """
        if self.raw_us < earlier.raw_us:
            raise NegativeDurationError(micros_to_duration(earlier.raw_us - self.raw_us))
        return micros_to_duration(self.raw_us - earlier.raw_us)

    def checked_duration_since(self, earlier: WallTime) -> timedelta | None:
        if self.raw_us < earlier.raw_us:
            return None
        return micros_to_duration(self.raw_us - earlier.raw_us)

    def saturating_duration_since(self, earlier: WallTime) -> timedelta:
        return self.checked_duration_since(earlier) or timedelta(0)

    def elapsed(self, clock: Clock | None = None) -> timedelta:
        """Wall time elapsed since self.

        Raises:
            NegativeDurationError: If the wall clock is now earlier than self
        """
        return WallTime.now(clock).duration_since(self)

    def __sub__(self, other: DurationLike) -> WallTime:
        if not isinstance(other, timedelta | int | float):
            return NotImplemented
        return self._sub_duration(other)


UNIX_EPOCH = WallTime(0)
WallTime.UNIX_EPOCH = UNIX_EPOCH
