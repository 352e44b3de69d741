"""
Flush executor: one Batch in, exactly one bulk-insert request out.

Failures are logged and counted, never retried. The batch is cleared after
every attempt regardless of outcome.
"""

from __future__ import annotations

import time

from loguru import logger

from ch_client import SinkError, encode_json_each_row

from ..metrics.registry import metrics_registry
from .buffer import Batch
from .types import BulkInsertSink, FlushOutcome, FlushTrigger


class FlushExecutor:
    def __init__(self, sink: BulkInsertSink, *, target: str = "clickhouse"):
        self._sink = sink
        self._target = target

    async def flush(self, batch: Batch, trigger: FlushTrigger) -> FlushOutcome:
        """Send the batch as one JSONEachRow insert, then clear it.

        Args:
            batch: Non-empty batch, owned by the caller's loop
            trigger: What caused this flush (for logs/metrics)

        Returns:
            FlushOutcome describing the attempt
        """
        rows = len(batch)
        if rows == 0:
            raise ValueError("cannot flush an empty batch")

        body = encode_json_each_row(batch.snapshot())
        t0 = time.perf_counter()
        try:
            result = await self._sink.insert(body)
        except SinkError as exc:
            outcome = FlushOutcome(
                trigger=trigger,
                rows=rows,
                ok=False,
                error=f"{type(exc).__name__}: {exc}",
                elapsed_ms=(time.perf_counter() - t0) * 1000.0,
            )
            logger.error(
                f"ClickHouse insert failed ({self._target}, {rows} rows dropped): {outcome.error}"
            )
        else:
            outcome = FlushOutcome(
                trigger=trigger,
                rows=rows,
                ok=result.ok,
                status_code=result.status_code,
                error=None if result.ok else result.body,
                elapsed_ms=(time.perf_counter() - t0) * 1000.0,
            )
            if result.ok:
                logger.debug(
                    f"Flushed {rows} rows to {self._target} "
                    f"trigger={trigger.value} in {outcome.elapsed_ms:.1f}ms"
                )
            else:
                logger.error(f"ClickHouse insert failed: {result.status_code} :: {result.body}")
        finally:
            batch.clear()

        self._record(outcome)
        return outcome

    @staticmethod
    def _record(outcome: FlushOutcome) -> None:
        status = "success" if outcome.ok else "failure"
        metrics_registry.flushes_total.labels(trigger=outcome.trigger.value, status=status).inc()
        metrics_registry.flush_latency_ms.labels(trigger=outcome.trigger.value).observe(
            outcome.elapsed_ms
        )
        metrics_registry.flush_rows.observe(outcome.rows)
