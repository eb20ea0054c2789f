from __future__ import annotations

import logging
import functools
from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, NoReturn, TypeVar

from .async_util import sleep
from .errors import ConfigError, RetryExit
from .util import tryit

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_TIMES = 3

Exit = Callable[[Any], NoReturn]
Backoff = Callable[[int], float]


@dataclass(frozen=True)
class RetryOptions:
    times: int = DEFAULT_TIMES
    delay: float | None = None
    backoff: Backoff | None = None

    def __post_init__(self) -> None:
        if isinstance(self.times, bool) or not isinstance(self.times, int) or self.times < 1:
            raise ConfigError("retry times must be a positive integer", times=self.times)
        if self.delay is not None and self.delay < 0:
            raise ConfigError("retry delay must be non-negative", delay=self.delay)


class AttemptKind(Enum):
    VALUE = auto()   # attempt returned
    FAILURE = auto() # attempt raised, may be retried
    ABORT = auto()   # attempt called exit()


@dataclass(frozen=True)
class Attempt(Generic[T]):
    kind: AttemptKind
    payload: Any


class _Escape(Exception):
    def __init__(self, payload: Any, owner: object):
        super().__init__(payload)
        self.payload = payload
        self.owner = owner


def _make_exit(owner: object) -> Exit:
    def exit(payload: Any) -> NoReturn:
        raise _Escape(payload, owner)
    return exit


async def run_attempt(
    func: Callable[[Exit], Awaitable[T]],
    owner: object | None = None,
) -> Attempt[T]:
    """
    Invoke func once and classify the outcome.

    `owner` ties the exit() handed to func to one retry call. An exit()
    belonging to an enclosing retry is not ours to classify and propagates.
    """
    owner = owner if owner is not None else object()
    err, value = await tryit(func)(_make_exit(owner))
    if err is None:
        return Attempt(AttemptKind.VALUE, value)
    if isinstance(err, _Escape):
        if err.owner is not owner:
            raise err
        return Attempt(AttemptKind.ABORT, err.payload)
    return Attempt(AttemptKind.FAILURE, err)


def _as_exception(payload: Any) -> BaseException:
    if isinstance(payload, BaseException):
        return payload
    return RetryExit(payload)


async def retry(
    options: RetryOptions | None,
    func: Callable[[Exit], Awaitable[T]],
    *,
    log: bool = False,
) -> T:
    """
    Call func(exit) up to options.times times and return the first success.

    Usage:
        async def list_users(exit):
            resp = await api.users.list()
            if resp.status == 401:
                exit("not authenticated")
            return resp.json()

        users = await retry(RetryOptions(times=5, delay=0.2), list_users)

    Between failed attempts it sleeps `delay`, then `backoff(attempt)`; when
    both are set both apply. Calling exit(payload) stops immediately: an
    exception payload is raised as is, anything else as RetryExit. When every
    attempt fails the last exception is raised.
    """
    options = options or RetryOptions()
    owner = object()

    for attempt in range(1, options.times + 1):
        outcome = await run_attempt(func, owner)

        if outcome.kind is AttemptKind.VALUE:
            return outcome.payload
        if outcome.kind is AttemptKind.ABORT:
            if log: logger.info("retry exited on attempt %d: %r", attempt, outcome.payload)
            raise _as_exception(outcome.payload)

        if log: logger.warning("attempt %d/%d failed: %r", attempt, options.times, outcome.payload)
        if attempt == options.times:
            if log: logger.info("retry exhausted after %d attempts", options.times)
            raise outcome.payload

        if options.delay:
            await sleep(options.delay)
        if options.backoff:
            await sleep(options.backoff(attempt))

    raise AssertionError("unreachable")  # pragma: no cover


def with_retry(
    times: int = DEFAULT_TIMES,
    delay: float | None = None,
    backoff: Backoff | None = None,
    *,
    log: bool = False,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator: `async def f(exit, *args)` becomes `async def f(*args)`
    running under retry.

    Usage:
    @with_retry()  # defaults
    @with_retry(times=5, backoff=lambda n: 0.1 * 2 ** n)
    """
    options = RetryOptions(times, delay, backoff)

    def decorator(f: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(f)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry(options, lambda exit: f(exit, *args, **kwargs), log=log)
        return wrapper

    return decorator
