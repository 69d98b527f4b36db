"""In-memory implementation of PromptCacheStore.

Entries expire lazily: an expired entry is dropped the next time it is
read, or by the optional background sweeper. The store is guarded by a
single lock that is never held across I/O, so it is safe to share between
threads and between asyncio tasks.

Concurrent misses on the same key are not de-duplicated: each caller
fetches and each calls ``set``; the last write wins.
"""

import logging
import threading
import time
from collections.abc import Callable

from langfuse_client.entities import CacheEntryEntity, ChatPrompt, Prompt, PromptKey, PromptKind, TextPrompt

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60.0


class InMemoryPromptCache:
    """TTL cache for prompts, keyed by (kind, PromptKey).

    This class satisfies the PromptCacheStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        cache = InMemoryPromptCache(ttl=60)
        cache.set_text(PromptKey.of("greeting"), prompt)
        cache.get_text(PromptKey.of("greeting"))  # prompt, for the next 60s
        cache.dispose()
        ```
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        sweep_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl: Time-to-live in seconds. Zero or negative disables caching.
            sweep_interval: If set, purge expired entries every N seconds on
                a daemon thread.
            clock: Monotonic time source in seconds.
        """
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._spaces: dict[str, dict[PromptKey, CacheEntryEntity[Prompt]]] = {"text": {}, "chat": {}}
        self._disposed = False
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

        if sweep_interval is not None and sweep_interval <= 0:
            raise ValueError("sweep_interval must be positive")

        if sweep_interval is not None and self.enabled:
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                args=(sweep_interval,),
                name="prompt-cache-sweeper",
                daemon=True,
            )
            self._sweeper.start()

    @property
    def ttl(self) -> float:
        """Time-to-live for new entries, in seconds."""
        return self._ttl

    @property
    def enabled(self) -> bool:
        """False when the TTL disables caching."""
        return self._ttl > 0

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _space(self, kind: PromptKind) -> dict[PromptKey, CacheEntryEntity[Prompt]]:
        try:
            return self._spaces[kind]
        except KeyError:
            raise ValueError(f"Unknown prompt kind: {kind!r}") from None

    def get(self, kind: PromptKind, key: PromptKey) -> Prompt | None:
        """Return the cached prompt, or None if absent or expired."""
        if not self.enabled:
            return None

        with self._lock:
            space = self._space(kind)
            entry = space.get(key)
            if entry is None:
                return None
            if not entry.is_valid(self._clock()):
                del space[key]
                return None
            return entry.value

    def set(self, kind: PromptKind, key: PromptKey, value: Prompt) -> None:
        """Insert or overwrite the entry for key with a fresh expiration."""
        if not self.enabled:
            return

        with self._lock:
            if self._disposed:
                return
            self._space(kind)[key] = CacheEntryEntity(value=value, expires_at=self._clock() + self._ttl)

    def get_text(self, key: PromptKey) -> TextPrompt | None:
        value = self.get("text", key)
        return value if isinstance(value, TextPrompt) else None

    def set_text(self, key: PromptKey, value: TextPrompt) -> None:
        self.set("text", key, value)

    def get_chat(self, key: PromptKey) -> ChatPrompt | None:
        value = self.get("chat", key)
        return value if isinstance(value, ChatPrompt) else None

    def set_chat(self, key: PromptKey, value: ChatPrompt) -> None:
        self.set("chat", key, value)

    def clear(self) -> None:
        """Remove every entry in both spaces, valid or not."""
        with self._lock:
            for space in self._spaces.values():
                space.clear()

    def purge_expired(self) -> int:
        """Drop expired entries.

        Returns:
            Number of entries removed
        """
        removed = 0
        with self._lock:
            now = self._clock()
            for space in self._spaces.values():
                expired = [key for key, entry in space.items() if not entry.is_valid(now)]
                for key in expired:
                    del space[key]
                removed += len(expired)
        return removed

    def _sweep_loop(self, interval: float) -> None:
        while not self._stop.wait(interval):
            removed = self.purge_expired()
            if removed:
                logger.debug("Purged %d expired prompt cache entries", removed)

    def dispose(self) -> None:
        """Stop the sweeper and drop all entries. Safe to call repeatedly."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            for space in self._spaces.values():
                space.clear()

        self._stop.set()
        if self._sweeper is not None and self._sweeper is not threading.current_thread():
            self._sweeper.join()
        self._sweeper = None

    def __len__(self) -> int:
        with self._lock:
            return sum(len(space) for space in self._spaces.values())

    def __enter__(self) -> "InMemoryPromptCache":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()
