"""Bounded-concurrency helper for the ingestion worker pool.

Ingestion is sequential by default so that at most one outbound request
(scrape or embedding) is in flight at a time.  When a caller opts into
more throughput, :func:`throttled_gather` runs the per-document work with
a semaphore capping how many documents are processed at once.  Results
come back in input order, so accumulated points keep feed order.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    factories: list[Callable[[], Awaitable[_T]]],
    limit: int = 1,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run coroutine factories with at most *limit* running concurrently.

    Factories (zero-argument callables returning an awaitable) are used
    instead of bare coroutines so that no work starts before a slot is
    free; with ``limit=1`` this degenerates to a plain sequential loop.

    Parameters
    ----------
    factories:
        Zero-argument callables, each producing the awaitable to run.
    limit:
        Maximum number of awaitables executing at once.  Must be >= 1.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as *factories*.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def _wrapped(factory: Callable[[], Awaitable[_T]]) -> _T:
        async with semaphore:
            return await factory()

    return await asyncio.gather(
        *(_wrapped(f) for f in factories),
        return_exceptions=return_exceptions,
    )
