"""
Error hierarchy for awaitkit.

Failures raised by caller-supplied work are never wrapped; these types only
cover what the primitives themselves reject or signal.
"""

from __future__ import annotations

from typing import Any


class AwaitkitError(Exception):
    """Base class for errors raised by awaitkit itself."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ConfigError(AwaitkitError, ValueError):
    """Invalid arguments, rejected before any work starts."""

    pass


class RetryExit(AwaitkitError):
    """Raised by retry when exit() was called with a non-exception payload."""

    def __init__(self, payload: Any):
        super().__init__("retry exited", payload=payload)
        self.payload = payload
