"""Prompt cache protocol.

Defines the interface for the in-process store of fetched prompts. Text
and chat prompts live in separate identity spaces: the same PromptKey may
be present in one and absent from the other.
"""

from typing import Protocol, runtime_checkable

from langfuse_client.entities import Prompt, PromptKey, PromptKind


@runtime_checkable
class PromptCacheStore(Protocol):
    """Protocol for prompt cache backends."""

    @property
    def ttl(self) -> float:
        """Time-to-live for new entries, in seconds."""
        ...

    def get(self, kind: PromptKind, key: PromptKey) -> Prompt | None:
        """Return the cached prompt, or None if absent or expired.

        Args:
            kind: Identity space ("text" or "chat")
            key: Prompt identity
        """
        ...

    def set(self, kind: PromptKind, key: PromptKey, value: Prompt) -> None:
        """Insert or overwrite an entry, stamping a fresh expiration.

        Args:
            kind: Identity space ("text" or "chat")
            key: Prompt identity
            value: The prompt to cache
        """
        ...

    def clear(self) -> None:
        """Remove every entry immediately."""
        ...

    def dispose(self) -> None:
        """Release timers and entries. Idempotent."""
        ...
