"""Prompt identity used as the cache key."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptKey:
    """Identity of a prompt request: name plus optional version and label.

    A key without version and label stands for whatever the server resolves
    by default (the "production" label) and is cached under its own identity,
    never merged with the concrete version it resolved to.
    """

    name: str
    version: int | None = None
    label: str | None = None

    @classmethod
    def of(cls, name: str, version: int | None = None, label: str | None = None) -> "PromptKey":
        """Build a key, treating an empty label as no label."""
        return cls(name=name, version=version, label=label or None)

    def __str__(self) -> str:
        parts = [self.name]
        if self.version is not None:
            parts.append(f"version={self.version}")
        if self.label is not None:
            parts.append(f"label={self.label}")
        return ":".join(parts)
