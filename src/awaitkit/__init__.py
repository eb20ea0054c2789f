"""
Awaitkit - composable async control-flow primitives for Python.

This library provides error-as-value wrapping, scoped cleanup, bounded
concurrency with ordered results, and retry with backoff and early exit,
all built on asyncio.
"""

from .util import ResultPair, tryit, err_as_value, is_err, is_ok, get_err, unwrap, unwrap_or
from .defer import defer, deferred, DeferRegistration
from .parallel import parallel, WorkQueue, WorkItem, WorkItemResult, ItemResult
from .retry import retry, with_retry, RetryOptions, Attempt, AttemptKind
from .async_util import sleep, map, reduce
from .errors import AwaitkitError, ConfigError, RetryExit

__version__ = "0.1.0"

__all__ = [
    "ResultPair",
    "tryit",
    "err_as_value",
    "is_err",
    "is_ok",
    "get_err",
    "unwrap",
    "unwrap_or",
    "defer",
    "deferred",
    "DeferRegistration",
    "parallel",
    "WorkQueue",
    "WorkItem",
    "WorkItemResult",
    "ItemResult",
    "retry",
    "with_retry",
    "RetryOptions",
    "Attempt",
    "AttemptKind",
    "sleep",
    "reduce",
    "AwaitkitError",
    "ConfigError",
    "RetryExit",
]
