"""
Pytest configuration and fixtures for wallet-ingest.

Provides cross-platform event loop configuration and shared fakes.
"""

import asyncio
import sys
from typing import List, Optional

import pytest

from ch_client import InsertResult, SinkError

# Set policy *before* pytest-asyncio creates any loops
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


ZERO_PUBKEY = bytes(32)
ZERO_ADDRESS = "1" * 32  # base58 of 32 zero bytes


class RecordingSink:
    """Bulk-insert sink that records every body it receives.

    ``statuses`` are returned in order (200 once exhausted); an exception in
    ``errors`` is raised instead of answering for that call.
    """

    def __init__(
        self,
        statuses: Optional[List[int]] = None,
        errors: Optional[List[Optional[SinkError]]] = None,
        delay: float = 0.0,
    ):
        self.bodies: List[str] = []
        self._statuses = list(statuses or [])
        self._errors = list(errors or [])
        self._delay = delay

    async def insert(self, body: str) -> InsertResult:
        if self._delay:
            await asyncio.sleep(self._delay)
        self.bodies.append(body)
        if self._errors:
            err = self._errors.pop(0)
            if err is not None:
                raise err
        status = self._statuses.pop(0) if self._statuses else 200
        text = "" if status < 300 else "Code: 241. DB::Exception: Memory limit exceeded"
        return InsertResult(status_code=status, body=text)

    @property
    def batches(self) -> List[List[str]]:
        return [b.splitlines() for b in self.bodies]


@pytest.fixture
def recording_sink():
    """Factory for RecordingSink instances."""
    return RecordingSink


@pytest.fixture
def ch_config():
    """ClickHouse client config for testing."""
    return {
        "base_url": "http://clickhouse.test:8123",
        "user": "dev",
        "password": "dev",
        "database": "default",
        "table": "wallet_account_updates",
        "timeout_s": 2.0,
    }


@pytest.fixture
def zero_pubkey():
    return ZERO_PUBKEY


@pytest.fixture
def zero_address():
    return ZERO_ADDRESS
