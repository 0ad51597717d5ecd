"""
Unit tests for DocumentWriteQueue.
"""

import asyncio

import pytest

from bookreader.services.write_queue import DocumentWriteQueue


@pytest.mark.asyncio
async def test_writes_for_same_key_run_one_at_a_time():
    queue = DocumentWriteQueue()
    events = []

    async def write(name):
        async with queue.slot("@book"):
            events.append(f"start {name}")
            await asyncio.sleep(0.01)
            events.append(f"end {name}")

    await asyncio.gather(write("a"), write("b"), write("c"))

    assert events == [
        "start a",
        "end a",
        "start b",
        "end b",
        "start c",
        "end c",
    ]


@pytest.mark.asyncio
async def test_different_keys_do_not_block_each_other():
    queue = DocumentWriteQueue()
    release = asyncio.Event()
    entered = []

    async def slow_write():
        async with queue.slot("@book_a"):
            entered.append("a")
            await release.wait()

    async def other_write():
        async with queue.slot("@book_b"):
            entered.append("b")
            release.set()

    await asyncio.wait_for(asyncio.gather(slow_write(), other_write()), timeout=1)
    assert entered == ["a", "b"]


@pytest.mark.asyncio
async def test_is_busy():
    queue = DocumentWriteQueue()
    assert queue.is_busy("@book") is False
    async with queue.slot("@book"):
        assert queue.is_busy("@book") is True
    assert queue.is_busy("@book") is False


@pytest.mark.asyncio
async def test_slot_released_after_error():
    queue = DocumentWriteQueue()
    with pytest.raises(RuntimeError):
        async with queue.slot("@book"):
            raise RuntimeError("write failed")
    assert queue.is_busy("@book") is False
