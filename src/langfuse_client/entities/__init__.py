"""Domain entities for internal representation.

These are frozen dataclasses handed out to callers and stored in the
prompt cache. They are NOT the wire format - use the pydantic DTOs from
the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntryEntity
from .prompt import ChatMessage, ChatPrompt, Prompt, PromptKind, TextPrompt, compile_template
from .prompt_key import PromptKey
from .score import ScoreDataType, ScoreValue, resolve_score_value

__all__ = [
    "CacheEntryEntity",
    "ChatMessage",
    "ChatPrompt",
    "Prompt",
    "PromptKey",
    "PromptKind",
    "ScoreDataType",
    "ScoreValue",
    "TextPrompt",
    "compile_template",
    "resolve_score_value",
]
