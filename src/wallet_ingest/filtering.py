"""Address filters: which records get forwarded."""

from __future__ import annotations

import json
from typing import Callable, Iterable, List, Optional

AddressPredicate = Callable[[str], bool]


def parse_targets(raw: Optional[str]) -> List[str]:
    """Split a comma-separated address list, ignoring blanks."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def address_filter(targets: Optional[Iterable[str]]) -> AddressPredicate:
    """Exact-match predicate over base58 addresses; accepts all when empty."""
    wanted = frozenset(t.strip() for t in (targets or ()) if t and t.strip())
    if not wanted:
        return lambda address: True

    def _match(address: str) -> bool:
        return address in wanted

    return _match


def text_record_filter(accept: AddressPredicate) -> Callable[[str], bool]:
    """Apply an address predicate to a raw JSON record.

    Text that is not a JSON object with a string ``address`` is rejected.
    """

    def _filter(text: str) -> bool:
        try:
            obj = json.loads(text)
        except (ValueError, RecursionError):
            return False
        address = obj.get("address") if isinstance(obj, dict) else None
        return isinstance(address, str) and accept(address)

    return _filter
