from __future__ import annotations

import asyncio
from typing import Iterable, Optional

_CLOSED = object()


class MemorySource:
    """In-process message source backed by an asyncio.Queue.

    Payloads come out in push order; after close() the remaining payloads are
    still delivered, then next() returns None forever.
    """

    def __init__(self, payloads: Iterable[bytes] = ()):
        self._q: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._exhausted = False
        for p in payloads:
            self._q.put_nowait(p)

    def push(self, payload: bytes) -> None:
        if self._closed:
            raise RuntimeError("MemorySource is closed")
        self._q.put_nowait(payload)

    async def next(self) -> Optional[bytes]:
        if self._exhausted:
            return None
        item = await self._q.get()
        if item is _CLOSED:
            self._exhausted = True
            return None
        return item

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._q.put_nowait(_CLOSED)
