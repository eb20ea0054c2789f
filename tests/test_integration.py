"""Integration tests - primitives composed the way callers combine them."""

import asyncio
from typing import Any

import pytest

from awaitkit import (
    RetryOptions,
    defer,
    is_ok,
    parallel,
    reduce,
    retry,
    tryit,
    with_retry,
)

pytestmark = pytest.mark.integration


class TestComposition:

    @pytest.mark.asyncio
    async def test_parallel_items_retried_individually(self) -> None:
        attempts: dict[int, int] = {}

        async def fetch(x: int) -> int:
            async def attempt(exit: Any) -> int:
                attempts[x] = attempts.get(x, 0) + 1
                await asyncio.sleep(0)
                if x == 3:
                    exit(f"{x} is forbidden")
                if attempts[x] < 2:
                    raise ConnectionError("transient")
                return x * 100

            return await retry(RetryOptions(times=3), attempt)

        results = await parallel(2, [1, 2, 3, 4], fetch)

        assert [r.result for r in results] == [100, 200, None, 400]
        assert results[2].error.payload == "3 is forbidden"
        assert attempts == {1: 2, 2: 2, 3: 1, 4: 2}

    @pytest.mark.asyncio
    async def test_defer_releases_resources_around_parallel(self) -> None:
        opened: list[str] = []
        closed: list[str] = []

        async def job(register: Any) -> list[Any]:
            for name in ("db", "cache"):
                opened.append(name)
                register(lambda err, name=name: closed.append(name))

            async def work(x: int) -> int:
                if x < 0:
                    raise ValueError(x)
                return x

            return await parallel(3, [1, -1, 2], work)

        results = await defer(job)

        assert [r.ok for r in results] == [True, False, True]
        assert opened == ["db", "cache"]
        assert closed == ["db", "cache"]

    @pytest.mark.asyncio
    async def test_defer_sees_exhausted_retry_failure(self) -> None:
        seen: list[Any] = []

        @with_retry(times=2)
        async def always_fails(exit: Any) -> None:
            raise TimeoutError("slow upstream")

        async def job(register: Any) -> None:
            register(lambda err: seen.append(type(err)))
            await always_fails()

        pair = await tryit(defer)(job)

        assert not is_ok(pair)
        assert isinstance(pair.error, TimeoutError)
        assert seen == [TimeoutError]

    @pytest.mark.asyncio
    async def test_reduce_over_parallel_results(self, sample_data: list[int]) -> None:
        async def square(x: int) -> int:
            await asyncio.sleep(0)
            return x * x

        results = await parallel(4, sample_data, square)

        async def add(acc: int, r: Any) -> int:
            return acc + r.result

        assert await reduce(results, add, 0) == sum(x * x for x in sample_data)
