from __future__ import annotations

import logging
import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from .errors import ConfigError
from .util import tryit

T = TypeVar("T")

logger = logging.getLogger(__name__)

Cleanup = Callable[[BaseException | None], Any]
Register = Callable[..., None]


@dataclass(frozen=True)
class DeferRegistration:
    callback: Cleanup
    rethrow: bool = False


async def defer(
    func: Callable[[Register], Awaitable[T]],
    *,
    log: bool = False,
) -> T:
    """
    Run func(register) and then every cleanup it registered, in order.

    Usage:
        async def deploy(register):
            path = write_logs()
            register(lambda err: os.remove(path))
            register(report_status, rethrow=True)
            ...

        await defer(deploy)

    Each cleanup gets the body's exception (or None). Cleanups run on every
    exit path, cancellation included, and a failing cleanup never stops the
    ones after it. The first failing cleanup registered with rethrow=True
    replaces the body's outcome; otherwise the body's exception is raised or
    its value returned. A cancelled body re-raises its cancellation after
    the cleanups, whatever they do. Registration closes once the body
    settles: a late register() raises ConfigError.
    """
    callbacks: list[DeferRegistration] = []
    closed = False

    def register(callback: Cleanup, *, rethrow: bool = False) -> None:
        if closed:
            raise ConfigError("cannot register a cleanup after the deferred body settled")
        callbacks.append(DeferRegistration(callback, rethrow))

    try:
        err, response = await tryit(func)(register)
    except BaseException as exc:
        closed = True
        await _run_cleanups(callbacks, exc, log)
        raise
    closed = True

    rethrown = await _run_cleanups(callbacks, err, log)
    if rethrown is not None:
        raise rethrown from err
    if err is not None:
        raise err
    return response  # type: ignore[return-value]


async def _run_cleanups(
    callbacks: list[DeferRegistration],
    err: BaseException | None,
    log: bool,
) -> Exception | None:
    """Run every cleanup once, in order. Returns the first rethrow failure."""
    rethrown: Exception | None = None
    for entry in callbacks:
        cleanup_err, _ = await tryit(entry.callback)(err)
        if cleanup_err is None:
            continue
        if log: logger.warning("deferred cleanup %r failed: %r", entry.callback, cleanup_err)
        if entry.rethrow and rethrown is None:
            rethrown = cleanup_err
    return rethrown


def deferred(
    func: Callable[..., Awaitable[T]] | None = None,
    *,
    log: bool = False,
) -> Any:
    """
    Decorator: `async def f(register, *args)` becomes `async def f(*args)`
    running under defer.

    Usage:
    @deferred
    @deferred(log=True)
    """
    def decorator(f: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(f)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await defer(lambda register: f(register, *args, **kwargs), log=log)
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
