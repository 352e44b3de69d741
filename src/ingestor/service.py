"""
Process bootstrap: connect the subject, build the ClickHouse client once, and
run the batcher until the stream closes.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from ch_client import ClickHouseHttpClient
from wallet_ingest.batcher import Batcher, FlushExecutor
from wallet_ingest.filtering import address_filter, text_record_filter
from wallet_ingest.metrics import serve_metrics
from wallet_ingest.sources import MessageSource, NatsSource

from .config import Settings


def banner(settings: Settings) -> str:
    return (
        f"Ingestor up. NATS={settings.NATS_URL} subject={settings.NATS_SUBJECT} → "
        f"ClickHouse={settings.CH_HTTP}/{settings.CH_DB}.{settings.CH_TABLE} "
        f"(batch={settings.BATCH_SIZE}, flush={settings.FLUSH_MS}ms)"
    )


def build_batcher(
    settings: Settings, source: MessageSource, client: ClickHouseHttpClient
) -> Batcher:
    record_filter = None
    targets = settings.target_addresses
    if targets:
        record_filter = text_record_filter(address_filter(targets))
        logger.info(f"Forwarding only {len(targets)} target address(es)")

    return Batcher(
        source,
        FlushExecutor(client, target=client.target),
        max_batch_size=settings.BATCH_SIZE,
        flush_interval=settings.flush_interval,
        record_filter=record_filter,
        drain_on_close=settings.DRAIN_ON_CLOSE,
    )


async def run_service(settings: Settings, source: Optional[MessageSource] = None) -> int:
    """Run until the subject closes.

    Startup failures (SourceUnavailable, invalid client config) propagate.

    Returns:
        Number of buffered records lost at exit
    """
    logger.info(banner(settings))
    serve_metrics(settings.METRICS_PORT)

    if source is None:
        source = await NatsSource.connect(settings.NATS_URL, settings.NATS_SUBJECT)

    try:
        async with ClickHouseHttpClient(settings.clickhouse_config()) as client:
            batcher = build_batcher(settings, source, client)
            return await batcher.run()
    finally:
        await source.close()
