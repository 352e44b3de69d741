from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from ch_client import InsertResult


class FlushTrigger(str, Enum):
    """Why a flush attempt was made."""

    SIZE_REACHED = "size"
    TIMER_ELAPSED = "timer"
    SHUTDOWN = "shutdown"  # only with drain_on_close


@dataclass(frozen=True)
class FlushOutcome:
    """Result of a single flush attempt. Reporting only; never retried.

    Attributes:
        trigger: What caused the flush
        rows: Number of records sent
        ok: True if the sink answered with a 2xx status
        status_code: HTTP status, or None on transport error / timeout
        error: Response body or exception text on failure
        elapsed_ms: Wall time spent on the request
    """

    trigger: FlushTrigger
    rows: int
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    elapsed_ms: float = 0.0


class BulkInsertSink(Protocol):
    """Anything that accepts a JSONEachRow body in one request."""

    async def insert(self, body: str) -> InsertResult: ...


# Predicate over the decoded message text; False drops the record.
RecordFilter = Callable[[str], bool]
