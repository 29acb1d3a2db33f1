"""Async retry and bounded fan-out primitives.

Two patterns are exposed:

1. **call_with_retry** -- run an async operation, and on failure wait a
   fixed delay and try again, up to ``attempts`` total calls.  The embedding
   call sites use ``attempts=2`` (one retry after one second).

2. **bounded_gather** -- ``asyncio.gather`` with a semaphore in front of
   every awaitable so at most ``limit`` run at once.  Results come back in
   input order, which is what lets chunk embedding run in parallel while the
   stored chunk array keeps its index order.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

import structlog

from protege.utils.logging import get_logger

_T = TypeVar("_T")

_logger: structlog.BoundLogger = get_logger(__name__)


async def call_with_retry(
    operation: Callable[[], Awaitable[_T]],
    *,
    attempts: int = 2,
    delay: float = 1.0,
    event: str = "operation_retry",
    logger: structlog.BoundLogger | None = None,
    **log_context: object,
) -> _T:
    """Await ``operation()``, retrying with a fixed *delay* on any exception.

    Parameters
    ----------
    operation:
        Zero-argument callable returning a fresh awaitable per attempt.
    attempts:
        Total number of calls, including the first.  Values below 1 are
        treated as 1.
    delay:
        Seconds to sleep between attempts.
    event:
        Log event name emitted for every failed attempt that is retried.

    Raises
    ------
    Exception
        Whatever the final attempt raised.
    """
    if logger is None:
        logger = _logger

    total = max(1, attempts)
    for attempt in range(1, total + 1):
        try:
            return await operation()
        except Exception as exc:
            if attempt >= total:
                raise
            logger.warning(
                event,
                attempt=attempt,
                delay_s=delay,
                error=str(exc)[:200],
                **log_context,
            )
            await asyncio.sleep(delay)

    # Unreachable: the loop either returns or re-raises.
    raise RuntimeError("call_with_retry exhausted without a result")


async def bounded_gather(
    coros: list[Awaitable[_T]],
    limit: int,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run *coros* concurrently, at most *limit* at a time, preserving order."""
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    return await asyncio.gather(
        *(_wrapped(c) for c in coros),
        return_exceptions=return_exceptions,
    )
