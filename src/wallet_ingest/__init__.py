"""
Wallet Ingest

Forwards account-update events from a NATS subject into ClickHouse in
size/time-bounded batches.

Usage:
    from ch_client import ClickHouseHttpClient
    from wallet_ingest import Batcher, FlushExecutor, NatsSource

    source = await NatsSource.connect("nats://127.0.0.1:4222", "WALLET.updates")
    async with ClickHouseHttpClient({"table": "wallet_account_updates"}) as ch:
        await Batcher(source, FlushExecutor(ch), max_batch_size=200, flush_interval=0.5).run()
"""

from .batcher import Batch, Batcher, BatcherStats, FlushExecutor, FlushOutcome, FlushTrigger, Ticker
from .emitter import AccountUpdateEmitter
from .errors import IngestError, SourceUnavailable
from .filtering import address_filter, parse_targets, text_record_filter
from .records import AccountUpdate, normalize, parse_account_info
from .sources import MemorySource, MessageSource, NatsSource

__version__ = "0.1.0"
__all__ = [
    "Batch",
    "Batcher",
    "BatcherStats",
    "FlushExecutor",
    "FlushOutcome",
    "FlushTrigger",
    "Ticker",
    "AccountUpdateEmitter",
    "IngestError",
    "SourceUnavailable",
    "address_filter",
    "parse_targets",
    "text_record_filter",
    "AccountUpdate",
    "normalize",
    "parse_account_info",
    "MemorySource",
    "MessageSource",
    "NatsSource",
]
