"""
NATS subscription as a MessageSource.

Requires nats-py. Connection callbacks only log; reconnects are handled by the
client library. When the client gives up and closes, the subscription iterator
ends and next() returns None.
"""

from __future__ import annotations

from typing import Any, Optional

import nats
from loguru import logger

from ..errors import SourceUnavailable


class NatsSource:
    def __init__(self, nc: Any, sub: Any, subject: str):
        self._nc = nc
        self._sub = sub
        self._subject = subject
        self._messages = sub.messages

    @property
    def subject(self) -> str:
        return self._subject

    @classmethod
    async def connect(cls, url: str, subject: str, **options: Any) -> "NatsSource":
        """Connect and subscribe; raises SourceUnavailable on any failure."""

        async def _error_cb(e: Exception) -> None:
            logger.warning(f"NATS error: {type(e).__name__}: {e}")

        async def _disconnected_cb() -> None:
            logger.warning(f"NATS disconnected from {url}")

        async def _reconnected_cb() -> None:
            logger.info(f"NATS reconnected to {url}")

        async def _closed_cb() -> None:
            logger.error("NATS connection closed")

        try:
            nc = await nats.connect(
                servers=url,
                error_cb=_error_cb,
                disconnected_cb=_disconnected_cb,
                reconnected_cb=_reconnected_cb,
                closed_cb=_closed_cb,
                **options,
            )
        except Exception as e:
            raise SourceUnavailable(f"connect NATS {url}: {type(e).__name__}: {e}") from e

        try:
            sub = await nc.subscribe(subject)
        except Exception as e:
            await nc.close()
            raise SourceUnavailable(f"subscribe {subject}: {type(e).__name__}: {e}") from e

        logger.info(f"Subscribed to {subject} on {url}")
        return cls(nc, sub, subject)

    async def next(self) -> Optional[bytes]:
        try:
            msg = await self._messages.__anext__()
        except StopAsyncIteration:
            return None
        return msg.data

    async def close(self) -> None:
        if self._nc.is_closed:
            return
        try:
            await self._sub.unsubscribe()
        except Exception as e:
            logger.debug(f"NATS unsubscribe failed (ignored): {type(e).__name__}: {e}")
        await self._nc.close()
