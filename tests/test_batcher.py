"""Tests for the bounded-concurrency batch runner."""

from __future__ import annotations

import asyncio

import pytest

from ds_adoption.batcher import run_in_batches


class TestRunInBatches:
    @pytest.mark.asyncio
    async def test_preserves_order(self):
        async def fn(i: int) -> int:
            # later items finish first within a batch
            await asyncio.sleep(0.001 * (10 - i))
            return i * 10

        assert await run_in_batches(list(range(7)), fn, limit=3) == [0, 10, 20, 30, 40, 50, 60]

    @pytest.mark.asyncio
    async def test_concurrency_bounded_by_limit(self):
        active = 0
        peak = 0

        async def fn(i: int) -> int:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.005)
            active -= 1
            return i

        await run_in_batches(list(range(10)), fn, limit=4)
        assert peak == 4

    @pytest.mark.asyncio
    async def test_batches_run_sequentially(self):
        events: list[str] = []

        async def fn(i: int) -> int:
            events.append(f"start{i}")
            await asyncio.sleep(0.001)
            events.append(f"end{i}")
            return i

        await run_in_batches([0, 1, 2], fn, limit=2)
        # item 2 (second batch) starts only after both first-batch items end
        assert events.index("start2") > events.index("end0")
        assert events.index("start2") > events.index("end1")

    @pytest.mark.asyncio
    async def test_on_batch_progress(self):
        calls: list[tuple[int, int]] = []

        async def fn(i: int) -> int:
            return i

        await run_in_batches(list(range(5)), fn, limit=2, on_batch=lambda d, t: calls.append((d, t)))
        assert calls == [(2, 5), (4, 5), (5, 5)]

    @pytest.mark.asyncio
    async def test_empty_input(self):
        async def fn(i: int) -> int:
            return i

        assert await run_in_batches([], fn) == []

    @pytest.mark.asyncio
    async def test_flattening_lists(self):
        async def fn(i: int) -> list[int]:
            return [i] * i

        per_item = await run_in_batches([1, 2, 3], fn, limit=10)
        assert [x for xs in per_item for x in xs] == [1, 2, 2, 3, 3, 3]

    @pytest.mark.asyncio
    async def test_invalid_limit(self):
        async def fn(i: int) -> int:
            return i

        with pytest.raises(ValueError, match="concurrency limit"):
            await run_in_batches([1], fn, limit=0)
