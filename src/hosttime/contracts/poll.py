"""Poll-based asynchronous value contracts.

Every primitive exposes a non-blocking poll(waker) step:

- Poll.ready(value): the operation has resolved.
- Poll.pending(): not yet; the operation has arranged for `waker()` to be
  called once polling again can make progress.

Only the waker passed to the most recent poll() is guaranteed to be called.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

type Waker = Callable[[], None]


@dataclass(frozen=True, slots=True)
class Poll[T]:
    """Outcome of a single poll step.

    Use the factory methods to create instances.
    """

    is_ready: bool
    value: T | None = None

    @classmethod
    def ready(cls, value: T) -> Poll[T]:
        return cls(is_ready=True, value=value)

    @classmethod
    def pending(cls) -> Poll[Any]:
        return _PENDING

    @property
    def is_pending(self) -> bool:
        return not self.is_ready


_PENDING: Poll[Any] = Poll(is_ready=False)


@runtime_checkable
class Pollable[T](Protocol):
    """An operation that can be driven by repeated poll() calls.

    close() releases whatever the operation holds (host registrations,
    running tasks). It must be synchronous and safe to call more than once.
    """

    def poll(self, waker: Waker) -> Poll[T]: ...

    def close(self) -> None: ...
