"""Pytest configuration and fixtures for awaitkit tests."""

import asyncio
from typing import Any, Awaitable, Callable

import pytest


@pytest.fixture
def sample_data() -> list[int]:
    """Provide sample data for testing."""
    return [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]


@pytest.fixture
def call_log() -> list[Any]:
    """Ordered record of calls made by test doubles."""
    return []


@pytest.fixture
def flaky() -> Callable[[int], Callable[..., Awaitable[str]]]:
    """Build an operation that fails `failures` times, then returns 'ok'."""
    def build(failures: int) -> Callable[..., Awaitable[str]]:
        calls = {"n": 0}

        async def op(exit: Any = None) -> str:
            calls["n"] += 1
            await asyncio.sleep(0)
            if calls["n"] <= failures:
                raise RuntimeError(f"attempt {calls['n']} failed")
            return "ok"

        op.calls = calls  # type: ignore[attr-defined]
        return op

    return build


# Pytest markers for organizing tests
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
