"""
Producer side of the subject: account notifications in, JSON rows out.

Mirrors what the validator plugin publishes so the wire format is defined
and tested next to the consumer. Used by the ``publish`` CLI command.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol

from loguru import logger

from .filtering import AddressPredicate
from .records import AccountInfo, encode_pubkey, normalize


class Publisher(Protocol):
    """Fire-and-forget publish; nats.aio.client.Client satisfies this."""

    async def publish(self, subject: str, payload: bytes) -> None: ...


class AccountUpdateEmitter:
    def __init__(
        self,
        publisher: Publisher,
        subject: str,
        *,
        accept: Optional[AddressPredicate] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._publisher = publisher
        self._subject = subject
        self._accept = accept
        self._clock = clock
        self.published = 0
        self.skipped = 0

    async def update_account(self, info: AccountInfo, slot: int, is_startup: bool = False) -> bool:
        """Publish one account notification; returns True if a message was sent.

        Startup snapshot replays are skipped, as are addresses the filter rejects.
        """
        if is_startup:
            self.skipped += 1
            return False

        if self._accept is not None and not self._accept(encode_pubkey(info.pubkey)):
            self.skipped += 1
            return False

        row = normalize(info, slot, now=self._clock() if self._clock else None)
        await self._publisher.publish(self._subject, row.to_json().encode("utf-8"))
        self.published += 1
        logger.trace(f"published v{info.version} slot={slot} address={row.address}")
        return True
