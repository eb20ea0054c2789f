from __future__ import annotations

import asyncio
import logging
from asyncio import Queue, QueueEmpty
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, TypeVar

from .errors import ConfigError
from .util import tryit

T = TypeVar("T")
K = TypeVar("K")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkItem(Generic[T]):
    index: int
    payload: T


@dataclass(frozen=True)
class WorkItemResult(Generic[K]):
    index: int
    result: K | None
    error: Exception | None


@dataclass(frozen=True)
class ItemResult(Generic[K]):
    result: K | None
    error: Exception | None

    @property
    def ok(self) -> bool:
        return self.error is None


class WorkQueue(Generic[T]):
    '''
    Fixed workload shared by the workers of one parallel() call.

    claim() never suspends, so on a single event loop it hands each item to
    exactly one caller.
    '''

    def __init__(self, items: Iterable[T]) -> None:
        self._queue: Queue[WorkItem[T]] = Queue()
        for index, item in enumerate(items):
            self._queue.put_nowait(WorkItem(index, item))
        self.size = self._queue.qsize()

    def claim(self) -> WorkItem[T] | None:
        try:
            return self._queue.get_nowait()
        except QueueEmpty:
            return None

    def __len__(self) -> int:
        return self._queue.qsize()


async def _worker(
    work: WorkQueue[T],
    func: Callable[[T], Awaitable[K] | K],
    log: bool,
) -> list[WorkItemResult[K]]:
    results: list[WorkItemResult[K]] = []
    while True:
        next_item = work.claim()
        if next_item is None:
            return results
        error, result = await tryit(func)(next_item.payload)
        if error is not None and log:
            logger.warning("item %d failed: %r", next_item.index, error)
        results.append(WorkItemResult(next_item.index, result, error))


async def parallel(
    limit: int,
    items: Iterable[T],
    func: Callable[[T], Awaitable[K] | K],
    *,
    log: bool = False,
) -> list[ItemResult[K]]:
    """
    Run func over items with at most `limit` calls in flight.

    Failures are captured per item, never raised. The returned list is
    aligned to the input: element i holds the outcome for items[i] whatever
    order the calls finished in.

    Usage:
        results = await parallel(4, urls, fetch)
        pages = [r.result for r in results if r.ok]
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ConfigError("parallel limit must be a positive integer", limit=limit)

    work: WorkQueue[T] = WorkQueue(items)

    async with asyncio.TaskGroup() as tg:
        workers = [tg.create_task(_worker(work, func, log)) for _ in range(limit)]

    collected = [r for w in workers for r in w.result()]
    collected.sort(key=lambda r: r.index)
    return [ItemResult(r.result, r.error) for r in collected]
