from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from ..metrics.registry import metrics_registry
from ..sources.base import MessageSource
from .buffer import Batch
from .executor import FlushExecutor
from .ticker import Ticker
from .types import FlushOutcome, FlushTrigger, RecordFilter


@dataclass(frozen=True)
class BatcherStats:
    """Point-in-time counters for a Batcher."""

    received: int
    accepted: int
    dropped_invalid_utf8: int
    filtered: int
    flushes: int
    failed_flushes: int
    buffered: int
    skipped_ticks: int


class Batcher:
    """Single-loop subscriber that turns a message stream into bounded batches.

    One event is handled at a time: either the next message from the source or
    the next timer tick. A flush is awaited inside the loop, so messages that
    arrive meanwhile wait in the source and are taken on the next iteration.

    Example:
        batcher = Batcher(source, FlushExecutor(ch), max_batch_size=200, flush_interval=0.5)
        lost = await batcher.run()   # returns when the stream closes
    """

    def __init__(
        self,
        source: MessageSource,
        executor: FlushExecutor,
        *,
        max_batch_size: int = 200,
        flush_interval: float = 0.5,
        record_filter: Optional[RecordFilter] = None,
        drain_on_close: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        if flush_interval <= 0:
            raise ValueError("flush_interval must be > 0")
        self._source = source
        self._executor = executor
        self._batch = Batch(max_batch_size)
        self._flush_interval = flush_interval
        self._filter = record_filter
        self._drain_on_close = drain_on_close
        self._clock = clock
        self._ticker: Optional[Ticker] = None

        self._received = 0
        self._accepted = 0
        self._invalid = 0
        self._filtered = 0
        self._flushes = 0
        self._failed = 0
        self._last_outcome: Optional[FlushOutcome] = None

    @property
    def batch(self) -> Batch:
        return self._batch

    @property
    def last_outcome(self) -> Optional[FlushOutcome]:
        return self._last_outcome

    def stats(self) -> BatcherStats:
        return BatcherStats(
            received=self._received,
            accepted=self._accepted,
            dropped_invalid_utf8=self._invalid,
            filtered=self._filtered,
            flushes=self._flushes,
            failed_flushes=self._failed,
            buffered=len(self._batch),
            skipped_ticks=self._ticker.skipped if self._ticker else 0,
        )

    # --------------- event handlers

    async def on_message(self, payload: bytes) -> None:
        """Decode, filter and buffer one payload; flush when the batch fills."""
        self._received += 1
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            self._invalid += 1
            metrics_registry.messages_total.labels(outcome="invalid_utf8").inc()
            logger.warning(f"non-utf8 message dropped: {e}")
            return

        if self._filter is not None:
            try:
                keep = self._filter(text)
            except Exception as e:
                logger.warning(f"record filter raised, message dropped: {type(e).__name__}: {e}")
                keep = False
            if not keep:
                self._filtered += 1
                metrics_registry.messages_total.labels(outcome="filtered").inc()
                return

        self._batch.append(text)
        self._accepted += 1
        metrics_registry.messages_total.labels(outcome="accepted").inc()
        metrics_registry.buffered_rows.set(len(self._batch))

        if self._batch.is_full:
            await self._flush(FlushTrigger.SIZE_REACHED)

    async def on_timer_tick(self) -> None:
        if self._batch:
            await self._flush(FlushTrigger.TIMER_ELAPSED)

    # --------------- loop

    async def run(self) -> int:
        """Run until the source closes.

        Returns:
            Number of buffered records left unflushed when the loop exited
        """
        self._ticker = Ticker(self._flush_interval, clock=self._clock)
        msg_task: Optional[asyncio.Future] = None
        tick_task: Optional[asyncio.Future] = None
        logger.debug(
            f"Batcher loop started (batch={self._batch.max_size}, "
            f"flush={self._flush_interval * 1000:.0f}ms)"
        )

        try:
            while True:
                if msg_task is None:
                    msg_task = asyncio.ensure_future(self._source.next())
                if tick_task is None:
                    tick_task = asyncio.ensure_future(self._ticker.tick())

                done, _ = await asyncio.wait(
                    {msg_task, tick_task}, return_when=asyncio.FIRST_COMPLETED
                )

                # message before tick when both are ready
                if msg_task in done:
                    payload = msg_task.result()
                    msg_task = None
                    if payload is None:
                        logger.error("Message subscription closed; exiting.")
                        break
                    await self.on_message(payload)

                if tick_task in done:
                    tick_task.result()
                    tick_task = None
                    await self.on_timer_tick()
        finally:
            pending = [t for t in (msg_task, tick_task) if t is not None and not t.done()]
            for t in pending:
                t.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if self._drain_on_close and self._batch:
            await self._flush(FlushTrigger.SHUTDOWN)

        lost = len(self._batch)
        if lost:
            logger.warning(f"{lost} buffered records were not flushed before exit")
        logger.info(f"Batcher stopped: {self.stats()}")
        return lost

    # --------------- internals

    async def _flush(self, trigger: FlushTrigger) -> FlushOutcome:
        outcome = await self._executor.flush(self._batch, trigger)
        self._flushes += 1
        if not outcome.ok:
            self._failed += 1
        self._last_outcome = outcome
        metrics_registry.buffered_rows.set(len(self._batch))
        return outcome
