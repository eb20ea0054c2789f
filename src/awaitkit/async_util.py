from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from .errors import ConfigError
from .util import invoke

T = TypeVar("T")
K = TypeVar("K")

# marks an omitted argument where None is a legal value
SENTINEL = object()


async def sleep(seconds: float) -> None:
    """
    Suspend the caller for `seconds`. Not interruptible short of task cancellation.
    """
    if seconds < 0:
        raise ConfigError("sleep duration must be non-negative", seconds=seconds)
    await asyncio.sleep(seconds)


async def map(
    items: Iterable[T],
    func: Callable[[T], Awaitable[K] | K],
) -> list[K]:
    """
    Apply func to each item one at a time, in order. The first failure
    propagates and the remaining items are not visited.
    """
    results: list[K] = []
    for item in items:
        results.append(await invoke(func, item))
    return results


async def reduce(
    items: Iterable[T],
    reducer: Callable[[Any, T], Awaitable[Any] | Any],
    init: Any = SENTINEL,
) -> Any:
    """
    Left fold with an async reducer. Without init the first item seeds the fold.
    """
    values = list(items)
    if init is SENTINEL:
        if not values:
            raise ConfigError("cannot reduce empty sequence with no init value")
        acc, rest = values[0], values[1:]
    else:
        acc, rest = init, values

    for item in rest:
        acc = await invoke(reducer, acc, item)
    return acc
