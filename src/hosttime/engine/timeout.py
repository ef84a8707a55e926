# src/hosttime/engine/timeout.py
"""Timeout: race an operation against a deadline.

The inner operation is always polled before the deadline. A result produced
in the same scheduling turn as the deadline therefore counts as completed,
not elapsed.

State machine:

    RUNNING --inner ready--> COMPLETED
    RUNNING --deadline-----> ELAPSED

Both outcomes are terminal. Polling a resolved Timeout is a caller bug and
raises RuntimeError.
"""

from __future__ import annotations

from collections.abc import Awaitable, Generator
from types import TracebackType
from typing import Any

from hosttime.contracts.poll import Poll, Pollable, Waker
from hosttime.contracts.results import TimeoutResult
from hosttime.contracts.time import DurationLike, TimePoint
from hosttime.core.clock import Clock
from hosttime.core.logging import get_logger
from hosttime.engine.driver import as_pollable, wait_ready
from hosttime.engine.sleep import Sleep, sleep, sleep_until

logger = get_logger(__name__)


class Timeout[T]:
    """Operation paired with a deadline.

    Owns both the operation and the deadline Sleep. close() releases both:
    the operation's own cancellation path (for adapted awaitables, the task
    is cancelled) and the Sleep's host registration.
    """

    def __init__(self, deadline: Sleep, operation: Pollable[T] | Awaitable[T]) -> None:
        """Initialize timeout.

        Args:
            deadline: Sleep that fires at the deadline
            operation: Pollable, or any awaitable (coroutine, Task, Future)

        Raises:
            TypeError: If operation is neither pollable nor awaitable
        """
        self._sleep = deadline
        self._operation: Pollable[T] = as_pollable(operation)
        self._resolved = False

    @property
    def deadline(self) -> TimePoint:
        return self._sleep.deadline

    @property
    def operation(self) -> Pollable[T]:
        return self._operation

    def poll(self, waker: Waker) -> Poll[TimeoutResult[T]]:
        """Poll the operation, then the deadline.

        Raises:
            RuntimeError: If the timeout already resolved
        """
        if self._resolved:
            raise RuntimeError("Timeout polled after it resolved")

        inner = self._operation.poll(waker)
        if inner.is_ready:
            self._resolved = True
            return Poll.ready(TimeoutResult.completed(inner.value))

        if self._sleep.poll(waker).is_ready:
            self._resolved = True
            logger.debug("Timeout elapsed", deadline_us=self._sleep.deadline.raw_us)
            return Poll.ready(TimeoutResult.elapsed())

        return Poll.pending()

    def close(self) -> None:
        """Cancel the operation and release the deadline registration."""
        try:
            self._operation.close()
        finally:
            self._sleep.close()

    def __enter__(self) -> Timeout[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __await__(self) -> Generator[Any, None, TimeoutResult[T]]:
        return wait_ready(self.poll, on_exit=self.close).__await__()


def timeout_at[T](
    deadline: TimePoint,
    operation: Pollable[T] | Awaitable[T],
    *,
    clock: Clock | None = None,
) -> Timeout[T]:
    """Race `operation` against an absolute deadline."""
    return Timeout(sleep_until(deadline, clock=clock), operation)


def timeout[T](
    duration: DurationLike,
    operation: Pollable[T] | Awaitable[T],
    *,
    clock: Clock | None = None,
) -> Timeout[T]:
    """Race `operation` against a deadline `duration` from now."""
    return Timeout(sleep(duration, clock=clock), operation)
