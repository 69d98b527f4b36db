"""Repository layer for data access.

This layer holds the concrete implementations behind the protocols:
- HttpxTransport: the Langfuse API over httpx
- InMemoryPromptCache: the process-local TTL prompt cache

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from langfuse_client.protocols import PromptCacheStore, Transport

from .http_transport import HttpxTransport
from .memory_cache import DEFAULT_TTL, InMemoryPromptCache

__all__ = [
    "DEFAULT_TTL",
    "HttpxTransport",
    "InMemoryPromptCache",
    "PromptCacheStore",
    "Transport",
]
