"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the HTTP stack or the cache backend without touching services
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from langfuse_client.protocols import PromptCacheStore, Transport

    transport: Transport = HttpxTransport.create(settings)
    cache: PromptCacheStore = InMemoryPromptCache(ttl=60)
    ```
"""

from .prompt_cache import PromptCacheStore
from .transport import Transport

__all__ = [
    "PromptCacheStore",
    "Transport",
]
