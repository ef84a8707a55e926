"""Error types shared by the clock, sleep, interval and timeout layers.

Three kinds of failure exist:

- Elapsed: NOT an error condition. A Timeout's deadline fired before its
  inner operation finished. Returned inside TimeoutResult; raised only when
  the caller asks for it via TimeoutResult.unwrap().
- Programmer/configuration errors (TimeOverflowError): time arithmetic left
  the representable range. Never retried.
- Recoverable errors (NegativeDurationError): the caller decides.

HostContractError covers the host timer service misbehaving. The host is
assumed always available, so these are fatal and propagated.
"""

from __future__ import annotations

from datetime import timedelta


class Elapsed(TimeoutError):
    """A Timeout's deadline fired before the wrapped operation completed.

    Carries no payload. Instances compare equal to each other.
    """

    def __init__(self) -> None:
        super().__init__("deadline has elapsed")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Elapsed)

    def __hash__(self) -> int:
        return hash(Elapsed)


class TimeOverflowError(OverflowError):
    """Time arithmetic overflowed or underflowed the 64-bit microsecond range.

    Also raised when a host delay exceeds what the host timer service accepts.
    """


class NegativeDurationError(ValueError):
    """WallTime.duration_since() was given an `earlier` that is actually later.

    Attributes:
        duration: Magnitude of the negative gap (earlier - self)
    """

    def __init__(self, duration: timedelta) -> None:
        self.duration = duration
        super().__init__("second time provided was later than self")


class HostContractError(RuntimeError):
    """The host timer service failed to register or cancel a callback."""
