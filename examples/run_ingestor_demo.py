"""
Demo script for the wallet ingestor batcher.

Feeds an in-memory source, shows size- and timer-triggered flushes against a
sink that prints each JSONEachRow body, and a failing insert being dropped.
"""

import asyncio

from loguru import logger

from ch_client import InsertResult
from wallet_ingest.batcher import Batcher, FlushExecutor
from wallet_ingest.records import AccountInfoV1, normalize
from wallet_ingest.sources import MemorySource


class PrintSink:
    """Sink that logs bodies and rejects every third insert."""

    def __init__(self):
        self.calls = 0

    async def insert(self, body: str) -> InsertResult:
        self.calls += 1
        await asyncio.sleep(0.01)
        if self.calls % 3 == 0:
            return InsertResult(500, "Code: 60. DB::Exception: Table does not exist")
        logger.info(f"PrintSink got {body.count(chr(10))} rows")
        return InsertResult(200, "")


async def main():
    source = MemorySource()
    batcher = Batcher(source, FlushExecutor(PrintSink(), target="demo"),
                      max_batch_size=25, flush_interval=0.2)
    runner = asyncio.create_task(batcher.run())

    logger.info("🚀 Producing 110 account updates")
    for i in range(110):
        info = AccountInfoV1(pubkey=bytes([i % 256]) * 32, lamports=1_000 + i)
        source.push(normalize(info, slot=300_000_000 + i).to_json().encode("utf-8"))
        if i == 60:
            source.push(b"\xff\xfe not utf-8")
        await asyncio.sleep(0.001)

    await asyncio.sleep(0.5)  # let the timer pick up the tail
    await source.close()
    lost = await runner
    logger.info(f"✅ Done: {batcher.stats()} lost={lost}")


if __name__ == "__main__":
    asyncio.run(main())
