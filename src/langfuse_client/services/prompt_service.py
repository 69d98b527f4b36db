"""Prompt service: cache-aware prompt retrieval with fallback.

Orchestrates the cache (PromptCacheStore) and the transport (Transport):
cache lookup, fetch on miss, type validation, materialization, cache fill.
"""

import logging
from typing import cast
from urllib.parse import quote

from pydantic import ValidationError

from langfuse_client.config import PROMPTS_PATH
from langfuse_client.dto import PromptApiResponse
from langfuse_client.entities import ChatPrompt, Prompt, PromptKey, PromptKind, TextPrompt
from langfuse_client.errors import (
    LangfuseApiError,
    PreconditionError,
    PromptTypeMismatchError,
    ResponseDecodeError,
)
from langfuse_client.protocols import PromptCacheStore, Transport

logger = logging.getLogger(__name__)


def build_prompt_path(name: str, version: int | None = None, label: str | None = None) -> str:
    """Build the request path for a prompt.

    Name and label are percent-encoded as URI components, so spaces, ``&``,
    ``=`` and ``/`` survive intact.

    Example:
        >>> build_prompt_path("test prompt", label="my label")
        '/api/public/v2/prompts/test%20prompt?label=my%20label'
    """
    path = f"{PROMPTS_PATH}/{quote(name, safe='')}"

    query = []
    if version is not None:
        query.append(f"version={int(version)}")
    if label:
        query.append(f"label={quote(label, safe='')}")

    if query:
        path += "?" + "&".join(query)
    return path


class PromptService:
    """Fetches text and chat prompts through an optional TTL cache.

    Failure policy:
        - remote failures (LangfuseApiError) are replaced by the fallback
          when one is given, otherwise re-raised;
        - PreconditionError and PromptTypeMismatchError always propagate;
        - cancellation propagates and leaves the cache untouched.

    Example:
        ```python
        service = PromptService(transport=transport, cache=InMemoryPromptCache(ttl=60))
        prompt = await service.get_prompt("greeting", label="production")
        text = prompt.compile(name="Ada")
        ```
    """

    def __init__(self, transport: Transport, cache: PromptCacheStore | None = None) -> None:
        """Initialize the prompt service.

        Args:
            transport: Transport used to reach the API (required).
            cache: Prompt cache. None disables caching.
        """
        self._transport = transport
        self._cache = cache

    @property
    def cache(self) -> PromptCacheStore | None:
        return self._cache

    async def get_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
        fallback: TextPrompt | None = None,
    ) -> TextPrompt:
        """Get a text prompt by name.

        Args:
            name: Prompt name. Spaces and special characters are allowed.
            version: Specific version number
            label: Label such as "production" or "staging". The server
                resolves "production" when neither version nor label is given.
            fallback: Returned instead of raising when the fetch fails

        Returns:
            The text prompt

        Raises:
            PreconditionError: If name is empty
            PromptTypeMismatchError: If the prompt is a chat prompt
            LangfuseApiError: If the fetch fails and no fallback is given
        """
        return cast(TextPrompt, await self.fetch("text", name, version, label, fallback))

    async def get_chat_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
        fallback: ChatPrompt | None = None,
    ) -> ChatPrompt:
        """Get a chat prompt by name.

        Same arguments and failure policy as get_prompt, for chat prompts.
        """
        return cast(ChatPrompt, await self.fetch("chat", name, version, label, fallback))

    async def fetch(
        self,
        kind: PromptKind,
        name: str,
        version: int | None = None,
        label: str | None = None,
        fallback: Prompt | None = None,
    ) -> Prompt:
        """Cache-aware fetch of a prompt of the given kind.

        Business logic:
        1. Build the identity key
        2. Return a valid cached entry if there is one
        3. Fetch from the API on miss
        4. Reject a payload of the wrong kind
        5. Materialize, cache and return the prompt
        """
        if not isinstance(name, str) or not name.strip():
            raise PreconditionError("Prompt name must be a non-empty string", {"name": name})
        if fallback is not None and fallback.type != kind:
            raise PreconditionError(
                f"Fallback for a {kind} prompt must be a {kind} prompt, got {fallback.type}",
                {"name": name},
            )

        key = PromptKey.of(name, version, label)

        if self._cache is not None:
            cached = self._cache.get(kind, key)
            if cached is not None:
                logger.debug("Prompt cache hit for %s", key)
                return cached

        try:
            response = await self._request(name, version, label)
        except LangfuseApiError as e:
            if fallback is None:
                raise
            logger.warning("Failed to fetch prompt %s, using fallback", key, exc_info=e)
            return fallback

        if response.type != kind:
            raise PromptTypeMismatchError(name, expected=kind, actual=response.type)

        try:
            prompt: Prompt = response.to_text_prompt() if kind == "text" else response.to_chat_prompt()
        except ValueError as e:
            if fallback is None:
                raise ResponseDecodeError(str(e), 200, details={"name": name}) from e
            logger.warning("Malformed prompt payload for %s, using fallback", key, exc_info=e)
            return fallback

        if self._cache is not None:
            self._cache.set(kind, key, prompt)
            logger.debug("Cached prompt %s (version %d)", key, prompt.version)

        return prompt

    async def _request(self, name: str, version: int | None, label: str | None) -> PromptApiResponse:
        if version is not None and label:
            # both are sent; the server decides which one wins
            logger.debug("Fetching prompt %r with both version=%s and label=%r", name, version, label)

        payload = await self._transport.send("GET", build_prompt_path(name, version, label))

        try:
            return PromptApiResponse.model_validate(payload)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"Unexpected prompt payload for '{name}': {e.error_count()} validation error(s)",
                200,
                payload,
            ) from e

    def clear_cache(self) -> None:
        """Clear all cached prompts."""
        if self._cache is not None:
            self._cache.clear()
