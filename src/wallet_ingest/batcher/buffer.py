from __future__ import annotations

from typing import Iterator, List


class Batch:
    """Ordered buffer of decoded records awaiting one bulk insert.

    Owned by a single Batcher; not safe to share between concurrent flushes.
    """

    def __init__(self, max_size: int):
        if max_size <= 0:
            raise ValueError("max_size must be > 0")
        self._max_size = max_size
        self._records: List[str] = []

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    @property
    def is_full(self) -> bool:
        return len(self._records) >= self._max_size

    def append(self, record: str) -> None:
        self._records.append(record)

    def snapshot(self) -> List[str]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def drain(self) -> List[str]:
        """Return all records in arrival order and reset to empty."""
        records = self._records
        self._records = []
        return records
