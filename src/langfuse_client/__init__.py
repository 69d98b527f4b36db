"""Langfuse client - prompt management and scores with a local prompt cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (Transport, PromptCacheStore)
    - repositories: Implementations (HttpxTransport, InMemoryPromptCache)
    - services: Business logic (PromptService, ScoreService)
    - dto: Data transfer objects (API wire format)
    - entities: Domain models (prompts, cache entries, score types)

Usage:
    ```python
    from langfuse_client import LangfuseClient, TextPrompt

    async with LangfuseClient.create() as langfuse:
        prompt = await langfuse.get_prompt("greeting", fallback=TextPrompt.fallback("Hi {{name}}"))
        print(prompt.compile(name="Ada"))
    ```
"""

from langfuse_client.client import LangfuseClient
from langfuse_client.config import Settings, get_settings
from langfuse_client.dto import PromptApiResponse, ScoreRequest
from langfuse_client.entities import ChatMessage, ChatPrompt, PromptKey, ScoreDataType, TextPrompt
from langfuse_client.errors import (
    AuthenticationError,
    ClientError,
    ConfigurationError,
    LangfuseApiError,
    LangfuseError,
    NotFoundError,
    PreconditionError,
    PromptTypeMismatchError,
    ResponseDecodeError,
    ServerError,
    StatusClass,
    TransportFailureError,
)
from langfuse_client.protocols import PromptCacheStore, Transport
from langfuse_client.repositories import HttpxTransport, InMemoryPromptCache
from langfuse_client.services import PromptService, ScoreService

__all__ = [
    # Client
    "LangfuseClient",
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "PromptCacheStore",
    "Transport",
    # Services (business logic)
    "PromptService",
    "ScoreService",
    # Repositories (data access)
    "HttpxTransport",
    "InMemoryPromptCache",
    # Entities (domain models)
    "ChatMessage",
    "ChatPrompt",
    "PromptKey",
    "ScoreDataType",
    "TextPrompt",
    # DTOs (wire format)
    "PromptApiResponse",
    "ScoreRequest",
    # Errors
    "LangfuseError",
    "PreconditionError",
    "ConfigurationError",
    "PromptTypeMismatchError",
    "LangfuseApiError",
    "AuthenticationError",
    "NotFoundError",
    "ClientError",
    "ServerError",
    "TransportFailureError",
    "ResponseDecodeError",
    "StatusClass",
]
