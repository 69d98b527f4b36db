"""Prompt cache entry domain entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntryEntity(Generic[T]):
    """A cached value paired with the moment it stops being valid.

    Attributes:
        value: The cached prompt
        expires_at: Clock reading (seconds) at which the entry expires
    """

    value: T
    expires_at: float

    def is_valid(self, now: float) -> bool:
        """An entry is valid strictly before its expiration."""
        return now < self.expires_at
