"""Bridges between poll-based operations and asyncio.

- wait_ready(): await a poll(waker) step function from a coroutine.
- AwaitablePollable: drive an asyncio awaitable through poll(waker), so it
  can race inside a Timeout.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any

from hosttime.contracts.poll import Poll, Pollable, Waker


def _wake(woken: asyncio.Future[None]) -> None:
    # Stale wakers from an abandoned await may still be called by the host
    if not woken.done():
        woken.set_result(None)


async def wait_ready[T](
    poll: Callable[[Waker], Poll[T]],
    *,
    on_exit: Callable[[], None] | None = None,
) -> T:
    """Poll until ready, suspending on an asyncio future in between.

    Each pending poll gets a fresh waker bound to a fresh future, so a
    wake-up from an earlier round can never resume a later one.

    Args:
        poll: Non-blocking step function
        on_exit: Called synchronously when the wait ends for any reason
            (ready, exception, or cancellation of the awaiting task)

    Returns:
        The ready value
    """
    loop = asyncio.get_running_loop()
    try:
        while True:
            woken: asyncio.Future[None] = loop.create_future()
            result = poll(partial(_wake, woken))
            if result.is_ready:
                return result.value  # type: ignore[return-value]
            await woken
    finally:
        if on_exit is not None:
            on_exit()


class AwaitablePollable[T]:
    """Pollable view of an asyncio awaitable.

    The awaitable is wrapped in a Task on first poll (a running loop is
    required from then on). Coroutines start eagerly: they run up to their
    first suspension inside that poll, so one that returns without
    suspending is ready immediately.

    close() cancels the task if it is still running; an awaitable that was
    never polled is closed (coroutines) or cancelled (futures) so it does not
    outlive its owner.
    """

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable = awaitable
        self._task: asyncio.Future[T] | None = None
        self._waker: Waker | None = None

    def poll(self, waker: Waker) -> Poll[T]:
        if self._task is None:
            if inspect.iscoroutine(self._awaitable):
                self._task = asyncio.eager_task_factory(asyncio.get_running_loop(), self._awaitable)
            else:
                self._task = asyncio.ensure_future(self._awaitable)
            self._task.add_done_callback(self._on_done)
        if self._task.done():
            # Re-raises the operation's exception, if any
            return Poll.ready(self._task.result())
        self._waker = waker
        return Poll.pending()

    def _on_done(self, _task: asyncio.Future[T]) -> None:
        waker, self._waker = self._waker, None
        if waker is not None:
            waker()

    def close(self) -> None:
        self._waker = None
        if self._task is not None:
            if not self._task.done():
                self._task.cancel()
            return
        if inspect.iscoroutine(self._awaitable):
            self._awaitable.close()
        elif asyncio.isfuture(self._awaitable):
            self._awaitable.cancel()


def as_pollable(operation: Any) -> Pollable[Any]:
    """Return `operation` as a Pollable.

    Pollables are returned unchanged; awaitables are adapted.

    Raises:
        TypeError: If operation is neither pollable nor awaitable
    """
    if isinstance(operation, Pollable):
        return operation
    if inspect.isawaitable(operation):
        return AwaitablePollable(operation)
    raise TypeError(f"operation must be a Pollable or an awaitable, got {type(operation).__name__}")
