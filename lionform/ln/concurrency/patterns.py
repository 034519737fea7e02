# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Structured concurrency helpers built on AnyIO task groups.

All helpers are backend-neutral (asyncio/trio) and never leave tasks running
after they return.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

import anyio

T = TypeVar("T")
R = TypeVar("R")

__all__ = ("gather", "bounded_map")


async def gather(*aws: Awaitable[T]) -> list[T]:
    """Run awaitables concurrently and return their results in input order.

    The first exception cancels the remaining awaitables and propagates
    (wrapped in an ``ExceptionGroup`` by the task group).
    """
    if not aws:
        return []

    results: list[T | None] = [None] * len(aws)

    async def _runner(idx: int, aw: Awaitable[T]) -> None:
        results[idx] = await aw

    async with anyio.create_task_group() as tg:
        for i, aw in enumerate(aws):
            tg.start_soon(_runner, i, aw)

    return results  # type: ignore[return-value]


async def bounded_map(
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
    *,
    limit: int | None = None,
) -> list[R]:
    """Apply an async function to every item concurrently.

    Args:
        func: Async function applied to each item.
        items: Items to process.
        limit: Maximum number of calls in flight at once. ``None`` means
            unbounded.

    Returns:
        Results in the same order as ``items``.
    """
    items = list(items)
    if not items:
        return []
    if limit is None:
        return await gather(*(func(item) for item in items))

    limiter = anyio.CapacityLimiter(limit)
    results: list[R | None] = [None] * len(items)

    async def _runner(idx: int, item: T) -> None:
        async with limiter:
            results[idx] = await func(item)

    async with anyio.create_task_group() as tg:
        for i, item in enumerate(items):
            tg.start_soon(_runner, i, item)

    return results  # type: ignore[return-value]
