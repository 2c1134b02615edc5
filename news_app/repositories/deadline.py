import asyncio
import time
from typing import Awaitable, Callable, TypeVar

from news_app.domain import StorageError

T = TypeVar("T")


def remaining_time(deadline: float | None) -> float | None:
    """
    Seconds left until *deadline* (a ``time.monotonic()`` instant).

    Raises a timed-out ``StorageError`` when the deadline has passed.
    """
    if deadline is None:
        return None
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise StorageError("deadline exceeded", timed_out=True)
    return remaining


async def call_with_deadline(
    deadline: float | None,
    operation: Callable[..., Awaitable[T]],
    *args,
) -> T:
    """
    Await ``operation(*args)`` bounded by *deadline*.

    The operation is not started at all when the deadline already passed.
    A timeout cancels it (rolling back any open transaction) and surfaces
    as a timed-out ``StorageError``.
    """
    timeout = remaining_time(deadline)
    try:
        return await asyncio.wait_for(operation(*args), timeout)
    except asyncio.TimeoutError as exc:
        raise StorageError("deadline exceeded", timed_out=True) from exc
