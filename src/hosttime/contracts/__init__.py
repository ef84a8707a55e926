"""Shared contracts: time value types, poll protocol, results and errors.

This package is a leaf: it must not import from hosttime.core or
hosttime.engine at module level.
"""

from hosttime.contracts.enums import MissedTickBehavior, RegistrationState
from hosttime.contracts.errors import (
    Elapsed,
    HostContractError,
    NegativeDurationError,
    TimeOverflowError,
)
from hosttime.contracts.poll import Poll, Pollable, Waker
from hosttime.contracts.results import TimeoutResult
from hosttime.contracts.time import (
    MAX_RAW_US,
    UNIX_EPOCH,
    DurationLike,
    TimePoint,
    WallTime,
    as_duration,
    duration_to_micros,
    micros_to_duration,
)

__all__ = [
    "MAX_RAW_US",
    "UNIX_EPOCH",
    "DurationLike",
    "Elapsed",
    "HostContractError",
    "MissedTickBehavior",
    "NegativeDurationError",
    "Poll",
    "Pollable",
    "RegistrationState",
    "TimeOverflowError",
    "TimePoint",
    "TimeoutResult",
    "WallTime",
    "Waker",
    "as_duration",
    "duration_to_micros",
    "micros_to_duration",
]
