"""Bounded fan-out helper for independent provider calls.

The embedding client splits a document into several provider batches;
:func:`throttled_gather` runs them concurrently while keeping at most
``limit`` in flight and returning results in submission order, so the
caller can reassemble vectors without re-sorting.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    limit: int = 4,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with at most *limit* executing at once.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    limit:
        Maximum number of awaitables allowed to run simultaneously.  A
        fresh semaphore is created per call so the helper is safe to use
        from any event loop.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    return await asyncio.gather(
        *(_wrapped(c) for c in coros), return_exceptions=return_exceptions
    )
