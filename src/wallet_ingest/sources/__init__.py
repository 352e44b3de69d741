from .base import MessageSource
from .memory import MemorySource
from .nats_source import NatsSource

__all__ = ["MessageSource", "MemorySource", "NatsSource"]
