"""
Exceptions raised by the ingest pipeline outside the sink client.
"""


class IngestError(Exception):
    """Base error for wallet_ingest."""

    pass


class SourceUnavailable(IngestError):
    """Message source could not be reached or subscribed at startup."""

    pass

