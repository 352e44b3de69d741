"""
ClickHouse HTTP Client

Minimal async client for bulk JSONEachRow inserts over ClickHouse's HTTP
interface.

Usage:
    from ch_client import ClickHouseHttpClient, encode_json_each_row

    async with ClickHouseHttpClient({"base_url": "http://...", "table": "t"}) as ch:
        result = await ch.insert(encode_json_each_row(['{"a":1}', '{"a":2}']))
        if not result.ok:
            ...
"""

from .client import ClickHouseHttpClient, ClickHouseConfig, InsertResult
from .encoding import build_insert_url, encode_json_each_row, insert_statement
from .errors import SinkError, SinkRejected, SinkTimeout, SinkUnavailable, map_http_error

__version__ = "0.1.0"
__all__ = [
    "ClickHouseHttpClient",
    "ClickHouseConfig",
    "InsertResult",
    "build_insert_url",
    "encode_json_each_row",
    "insert_statement",
    "SinkError",
    "SinkRejected",
    "SinkTimeout",
    "SinkUnavailable",
    "map_http_error",
]
