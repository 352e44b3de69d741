"""Batcher

Subscriber -> batch -> flush pipeline with:
- Batch buffer bounded by a maximum row count
- Ticker with skip-missed-tick semantics
- FlushExecutor issuing one JSONEachRow insert per batch (drop on failure)
- Batcher loop multiplexing message arrival and timer ticks
"""

from .buffer import Batch
from .executor import FlushExecutor
from .loop import Batcher, BatcherStats
from .ticker import Ticker
from .types import BulkInsertSink, FlushOutcome, FlushTrigger, RecordFilter

__all__ = [
    # types
    "BulkInsertSink",
    "FlushOutcome",
    "FlushTrigger",
    "RecordFilter",
    "BatcherStats",
    # runtime
    "Batch",
    "Ticker",
    "FlushExecutor",
    "Batcher",
]
