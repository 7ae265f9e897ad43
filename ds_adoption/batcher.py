"""Bounded-concurrency batch runner."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 10


async def run_in_batches(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    limit: int = DEFAULT_CONCURRENCY,
    on_batch: Callable[[int, int], None] | None = None,
) -> list[R]:
    """Run *fn* over *items* in sequential batches of at most *limit*.

    Items within a batch run concurrently; the next batch starts only after
    the whole current batch has settled. Results keep input order.
    *fn* is expected to absorb its own failures.
    """
    if limit < 1:
        raise ValueError(f"concurrency limit must be >= 1, got {limit}")

    results: list[R] = []
    total = len(items)
    for start in range(0, total, limit):
        batch = items[start : start + limit]
        results.extend(await asyncio.gather(*(fn(item) for item in batch)))
        if on_batch is not None:
            on_batch(min(start + limit, total), total)
    return results
