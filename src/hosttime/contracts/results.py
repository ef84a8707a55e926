"""Operation outcomes.

IMPORTANT: TimeoutResult.status uses Literal["completed", "elapsed"], NOT an
enum. An elapsed deadline is an expected outcome of the race and is returned,
not raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from hosttime.contracts.errors import Elapsed


@dataclass(frozen=True, slots=True)
class TimeoutResult[T]:
    """Result of racing an operation against a deadline.

    Example:
        result = await timeout(timedelta(seconds=1), fetch())
        if result.is_elapsed:
            handle_slow_fetch()
        else:
            use(result.value)

        # Or, treating a missed deadline as an error:
        value = (await timeout(timedelta(seconds=1), fetch())).unwrap()
    """

    status: Literal["completed", "elapsed"]
    value: T | None = None

    @classmethod
    def completed(cls, value: T) -> TimeoutResult[T]:
        return cls(status="completed", value=value)

    @classmethod
    def elapsed(cls) -> TimeoutResult[Any]:
        return cls(status="elapsed")

    @property
    def is_elapsed(self) -> bool:
        return self.status == "elapsed"

    def unwrap(self) -> T:
        """Return the operation's value.

        Raises:
            Elapsed: If the deadline fired first
        """
        if self.status == "elapsed":
            raise Elapsed()
        return self.value  # type: ignore[return-value]
