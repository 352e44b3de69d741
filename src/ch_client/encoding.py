"""
Wire helpers for ClickHouse HTTP bulk inserts.
"""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote


def insert_statement(database: str, table: str) -> str:
    """INSERT ... FORMAT JSONEachRow for a fully-qualified table."""
    return f"INSERT INTO {database}.{table} FORMAT JSONEachRow"


def build_insert_url(base_url: str, database: str, table: str) -> str:
    # quote() keeps '.' and encodes spaces as %20
    return f"{base_url.rstrip('/')}/?query={quote(insert_statement(database, table))}"


def encode_json_each_row(records: Sequence[str]) -> str:
    """Join pre-serialized JSON objects into a newline-delimited body.

    Records are forwarded verbatim; each is expected to already be a single
    JSON object without embedded newlines.
    """
    return "\n".join(records) + "\n"
