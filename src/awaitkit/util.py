from __future__ import annotations

import inspect
import functools
from typing import Any, Awaitable, Callable, Generic, NamedTuple, TypeVar

T = TypeVar("T")


class ResultPair(NamedTuple, Generic[T]):
    '''
    (error, value) outcome of one call. Exactly one slot is meaningful:
    error is None on success, value is None on failure.
    '''
    error: Exception | None
    value: T | None


async def invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def tryit(func: Callable[..., Awaitable[T] | T]) -> Callable[..., Awaitable[ResultPair[T]]]:
    """
    Wrap func so calling it never raises: the outcome comes back as a ResultPair.

    Works for coroutine functions and plain callables alike. Only Exception
    subclasses are captured; cancellation and interpreter exits propagate.
    """
    async def wrapper(*args: Any, **kwargs: Any) -> ResultPair[T]:
        try:
            return ResultPair(None, await invoke(func, *args, **kwargs))
        except Exception as e:
            return ResultPair(e, None)

    return wrapper


def err_as_value(func: Callable[..., Awaitable[T] | T]) -> Callable[..., Awaitable[ResultPair[T]]]:
    """Decorator form of tryit."""
    return functools.wraps(func)(tryit(func))


def is_err(res: ResultPair[Any]) -> bool:
    return res.error is not None

def is_ok(res: ResultPair[Any]) -> bool:
    return not is_err(res)

def get_err(res: ResultPair[Any]) -> Exception | None:
    return res.error

def unwrap(res: ResultPair[T]) -> T:
    if res.error is not None:
        raise res.error
    return res.value  # type: ignore[return-value]

def unwrap_or(res: ResultPair[T], default: T) -> T:
    if res.error is not None:
        return default
    return res.value  # type: ignore[return-value]
