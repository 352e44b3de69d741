"""
Integration test for the full NATS → ClickHouse path (requires live services).

These tests require:
- nats-server reachable at INGEST_TEST_NATS_URL
- ClickHouse HTTP reachable at INGEST_TEST_CH_HTTP (user/pass from CH_USER/CH_PASS, default dev/dev)
- A JSONEachRow-compatible table named by INGEST_TEST_CH_TABLE (default wallet_account_updates)

Run with: pytest -v tests/integration -m integration
"""

import asyncio
import os
import uuid

import httpx
import nats
import pytest

from ch_client import ClickHouseHttpClient
from ingestor.config import Settings
from ingestor.service import run_service
from wallet_ingest.records import AccountInfoV1, normalize
from wallet_ingest.sources import NatsSource

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def live_settings():
    nats_url = os.getenv("INGEST_TEST_NATS_URL")
    ch_http = os.getenv("INGEST_TEST_CH_HTTP")
    if not nats_url or not ch_http:
        pytest.skip("Set INGEST_TEST_NATS_URL and INGEST_TEST_CH_HTTP for integration tests")

    return Settings(
        NATS_URL=nats_url,
        NATS_SUBJECT=f"WALLET.test.{uuid.uuid4().hex[:8]}",
        CH_HTTP=ch_http,
        CH_TABLE=os.getenv("INGEST_TEST_CH_TABLE", "wallet_account_updates"),
        BATCH_SIZE=2,
        FLUSH_MS=200,
    )


@pytest.mark.asyncio
async def test_ping(live_settings):
    async with ClickHouseHttpClient(live_settings.clickhouse_config()) as ch:
        assert await ch.ping()


@pytest.mark.asyncio
async def test_published_updates_land_in_clickhouse(live_settings):
    s = live_settings
    slot = 10_000_000 + int(uuid.uuid4().int % 1_000_000)
    records = [
        normalize(AccountInfoV1(pubkey=bytes([i]) * 32, lamports=1000 + i), slot).to_json()
        for i in range(3)
    ]

    source = await NatsSource.connect(s.NATS_URL, s.NATS_SUBJECT)
    task = asyncio.create_task(run_service(s, source=source))

    nc = await nats.connect(servers=s.NATS_URL)
    try:
        for r in records:
            await nc.publish(s.NATS_SUBJECT, r.encode("utf-8"))
        await nc.flush()
    finally:
        await nc.close()

    await asyncio.sleep(1.0)
    await source.close()
    await asyncio.wait_for(task, timeout=5.0)

    query = f"SELECT count() FROM {s.CH_DB}.{s.CH_TABLE} WHERE slot = {slot} FORMAT TabSeparated"
    async with httpx.AsyncClient(auth=(s.CH_USER, s.CH_PASS), timeout=5.0) as http:
        resp = await http.post(s.CH_HTTP.rstrip("/") + "/", content=query)
    assert resp.status_code == 200
    assert int(resp.text.strip()) == 3
