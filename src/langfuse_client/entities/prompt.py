"""Prompt domain entities.

``Prompt`` is a tagged union of ``TextPrompt`` and ``ChatPrompt``; the
``type`` attribute is the tag. Both variants compile ``{{variable}}``
placeholders, and unresolved placeholders are left verbatim.
"""

import copy
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Union

PromptKind = Literal["text", "chat"]

_PLACEHOLDER = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")


def compile_template(template: str, variables: Mapping[str, Any]) -> str:
    """Substitute ``{{name}}`` placeholders with values from ``variables``.

    Args:
        template: Template text
        variables: Values by placeholder name, converted with ``str()``

    Returns:
        The compiled text. Placeholders without a value are kept as written.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        return str(variables[name])

    return _PLACEHOLDER.sub(_replace, template)


def _placeholders(template: str) -> list[str]:
    return [m.group(1) for m in _PLACEHOLDER.finditer(template)]


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_freeze(item) for item in value)
    return copy.deepcopy(value)


def _freeze_config(config: Mapping[str, Any] | None) -> Mapping[str, Any]:
    # nested mappings become read-only proxies and sequences become tuples
    return _freeze(config or {})


@dataclass(frozen=True)
class ChatMessage:
    """A single chat message template."""

    role: str
    content: str

    def compile(self, variables: Mapping[str, Any]) -> dict[str, str]:
        return {"role": self.role, "content": compile_template(self.content, variables)}


@dataclass(frozen=True)
class TextPrompt:
    """A text prompt template.

    Attributes:
        name: Prompt name
        version: Version number (0 for local fallbacks)
        prompt: Raw template text
        labels: Labels attached to this version
        tags: Free-form tags
        config: Read-only configuration (model parameters etc.)
        is_fallback: True when built locally instead of fetched
    """

    name: str
    version: int
    prompt: str
    labels: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    config: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    is_fallback: bool = False

    type: Literal["text"] = field(default="text", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "config", _freeze_config(self.config))

    @classmethod
    def fallback(cls, text: str, name: str = "fallback") -> "TextPrompt":
        """Build a local prompt to use when fetching fails."""
        return cls(name=name, version=0, prompt=text, is_fallback=True)

    @property
    def variables(self) -> list[str]:
        """Placeholder names in order of first appearance."""
        return list(dict.fromkeys(_placeholders(self.prompt)))

    def compile(self, **variables: Any) -> str:
        return compile_template(self.prompt, variables)


@dataclass(frozen=True)
class ChatPrompt:
    """A chat prompt template: an ordered sequence of role/content messages."""

    name: str
    version: int
    messages: tuple[ChatMessage, ...]
    labels: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    config: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    is_fallback: bool = False

    type: Literal["chat"] = field(default="chat", init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "config", _freeze_config(self.config))

    @classmethod
    def fallback(
        cls,
        messages: Iterable[ChatMessage | Mapping[str, str] | tuple[str, str]],
        name: str = "fallback",
    ) -> "ChatPrompt":
        """Build a local chat prompt to use when fetching fails.

        Messages may be ChatMessage instances, ``{"role", "content"}`` dicts
        or ``(role, content)`` tuples.
        """
        built = []
        for message in messages:
            if isinstance(message, ChatMessage):
                built.append(message)
            elif isinstance(message, Mapping):
                built.append(ChatMessage(role=message["role"], content=message["content"]))
            else:
                role, content = message
                built.append(ChatMessage(role=role, content=content))
        return cls(name=name, version=0, messages=tuple(built), is_fallback=True)

    @property
    def variables(self) -> list[str]:
        """Placeholder names across all messages, in order of first appearance."""
        names: list[str] = []
        for message in self.messages:
            names.extend(_placeholders(message.content))
        return list(dict.fromkeys(names))

    def compile(self, **variables: Any) -> list[dict[str, str]]:
        return [message.compile(variables) for message in self.messages]


Prompt = Union[TextPrompt, ChatPrompt]
