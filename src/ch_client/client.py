from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TypedDict

import httpx
from loguru import logger

from .encoding import build_insert_url
from .errors import SinkRejected, map_http_error


class ClickHouseConfig(TypedDict, total=False):
    base_url: str
    user: str
    password: str
    database: str
    table: str
    timeout_s: float


DEFAULTS: ClickHouseConfig = {
    "base_url": "http://127.0.0.1:8123",
    "database": "default",
    "timeout_s": 10.0,
}


@dataclass(frozen=True)
class InsertResult:
    """Outcome of one bulk-insert request."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def raise_for_status(self) -> None:
        if not self.ok:
            raise SinkRejected(self.status_code, self.body)


class ClickHouseHttpClient:
    """
    Thin async client for ClickHouse's HTTP interface.

    The underlying httpx.AsyncClient is built once and reused for every
    request. Non-success statuses are returned, not raised; transport errors
    and timeouts are raised as SinkUnavailable / SinkTimeout.

    Usage:

        async with ClickHouseHttpClient({"base_url": "...", "table": "t"}) as ch:
            result = await ch.insert('{"a":1}\\n')
    """

    def __init__(
        self,
        cfg: ClickHouseConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cfg: ClickHouseConfig = {**DEFAULTS, **(cfg or {})}
        if "table" not in self.cfg:
            raise ValueError("table required")
        auth = None
        if self.cfg.get("user"):
            auth = httpx.BasicAuth(self.cfg["user"], self.cfg.get("password", ""))
        self.insert_url = build_insert_url(
            self.cfg["base_url"], self.cfg["database"], self.cfg["table"]
        )
        try:
            url = httpx.URL(self.insert_url)
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid ClickHouse base_url {self.cfg['base_url']!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"invalid ClickHouse base_url {self.cfg['base_url']!r}")
        self._client = httpx.AsyncClient(
            auth=auth,
            timeout=httpx.Timeout(self.cfg["timeout_s"]),
            transport=transport,
        )

    @property
    def target(self) -> str:
        return f"{self.cfg['database']}.{self.cfg['table']}"

    async def __aenter__(self) -> "ClickHouseHttpClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---------- health ----------

    async def ping(self) -> bool:
        try:
            resp = await self._client.get(f"{self.cfg['base_url'].rstrip('/')}/ping")
        except httpx.HTTPError as e:
            logger.warning(f"ClickHouse ping failed: {map_http_error(e)}")
            return False
        return resp.status_code == 200

    # ---------- writes ----------

    async def insert(self, body: str) -> InsertResult:
        """POST one JSONEachRow body; returns status and response text."""
        try:
            resp = await self._client.post(
                self.insert_url,
                content=body.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        except httpx.HTTPError as e:
            raise map_http_error(e) from e
        return InsertResult(status_code=resp.status_code, body=resp.text)
