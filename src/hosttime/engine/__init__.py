# src/hosttime/engine/__init__.py
"""Timer engine: poll-driven primitives over the host timer service.

- Sleep: one-shot deferred completion with an owned host registration
- Interval: periodic ticks with a missed-tick catch-up policy
- Timeout: race of an operation against a deadline

The factory functions (sleep, interval, timeout, ...) live in the submodules
and are re-exported from the top-level hosttime package.

Example:
    from hosttime import Clock, interval, timeout
    from hosttime.testing import MockTimerHost

    clock = Clock(MockTimerHost())
    ticks = interval(timedelta(seconds=1), clock=clock)
"""

from hosttime.engine.driver import AwaitablePollable, as_pollable, wait_ready
from hosttime.engine.interval import Interval
from hosttime.engine.sleep import HostRegistration, Sleep
from hosttime.engine.timeout import Timeout

__all__ = [
    "AwaitablePollable",
    "HostRegistration",
    "Interval",
    "Sleep",
    "Timeout",
    "as_pollable",
    "wait_ready",
]
