"""
Custom exceptions for the ClickHouse HTTP client.

Separates transport failures from server-side rejections so callers can log
each with the right context.
"""


class SinkError(Exception):
    """Base error for ClickHouse sink operations."""

    pass


class SinkUnavailable(SinkError):
    """Connection refused, DNS failure, reset, or any other transport error."""

    pass


class SinkTimeout(SinkError):
    """Request exceeded the configured per-request timeout."""

    pass


class SinkRejected(SinkError):
    """Server answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"{status_code} :: {body}")
        self.status_code = status_code
        self.body = body


def map_http_error(e: Exception) -> SinkError:
    import httpx

    if isinstance(e, SinkError):
        return e
    if isinstance(e, httpx.TimeoutException):
        return SinkTimeout(str(e) or type(e).__name__)
    if isinstance(e, httpx.HTTPError):
        return SinkUnavailable(str(e) or type(e).__name__)
    return SinkError(str(e))
