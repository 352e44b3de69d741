from __future__ import annotations

from typing import Optional, Protocol


class MessageSource(Protocol):
    """Async source of raw byte payloads on one subject.

    ``next()`` returns ``None`` once the stream is permanently closed.
    """

    async def next(self) -> Optional[bytes]: ...

    async def close(self) -> None: ...
