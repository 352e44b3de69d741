import asyncio

import pytest

from wallet_ingest.sources import MemorySource


@pytest.mark.asyncio
async def test_yields_in_order_then_none_after_close():
    src = MemorySource([b"a"])
    src.push(b"b")
    await src.close()

    assert await src.next() == b"a"
    assert await src.next() == b"b"
    assert await src.next() is None
    assert await src.next() is None


@pytest.mark.asyncio
async def test_next_waits_for_push():
    src = MemorySource()
    task = asyncio.create_task(src.next())
    await asyncio.sleep(0.01)
    assert not task.done()

    src.push(b"x")
    assert await asyncio.wait_for(task, timeout=1.0) == b"x"


@pytest.mark.asyncio
async def test_push_after_close_rejected():
    src = MemorySource()
    await src.close()
    with pytest.raises(RuntimeError):
        src.push(b"x")
