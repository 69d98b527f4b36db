"""Data Transfer Objects for the Langfuse wire format.

These Pydantic models mirror the public API's JSON payloads (camelCase on
the wire, snake_case in Python). They are used for request serialization
and response validation only.

Internal logic should use entities from the entities package.
"""

from .requests import ScoreRequest
from .responses import ChatMessageItem, PromptApiResponse, ScoreResponse

__all__ = [
    "ScoreRequest",
    "ChatMessageItem",
    "PromptApiResponse",
    "ScoreResponse",
]
