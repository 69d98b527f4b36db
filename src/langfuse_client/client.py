"""Langfuse client facade.

Wires settings, transport, prompt cache and services together and exposes
the public operations: prompt retrieval, score submission, cache clearing
and teardown.
"""

import httpx

from langfuse_client.config import Settings, get_settings
from langfuse_client.entities import ChatPrompt, ScoreValue, TextPrompt
from langfuse_client.protocols import PromptCacheStore, Transport
from langfuse_client.repositories import HttpxTransport, InMemoryPromptCache
from langfuse_client.services import PromptService, ScoreService


class LangfuseClient:
    """Client for the Langfuse prompt management and score APIs.

    Example:
        ```python
        async with LangfuseClient.create() as langfuse:
            prompt = await langfuse.get_prompt(
                "greeting",
                fallback=TextPrompt.fallback("Hello {{name}}"),
            )
            await langfuse.create_score(trace_id, "user-feedback", True)
        ```
    """

    def __init__(
        self,
        transport: Transport,
        cache: PromptCacheStore | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Transport used for every API call (required).
            cache: Prompt cache. None disables caching.
        """
        self._transport = transport
        self._cache = cache
        self._prompts = PromptService(transport=transport, cache=cache)
        self._scores = ScoreService(transport=transport)
        self._closed = False

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> "LangfuseClient":
        """Factory method to create a client from settings.

        Args:
            settings: Client settings. If None, loads them from the environment.
            http_client: Optional pre-built AsyncClient for the transport.

        Returns:
            Configured LangfuseClient

        Raises:
            ConfigurationError: If the base URL or API keys are missing
        """
        settings = settings or get_settings()
        transport = HttpxTransport.create(settings, client=http_client)

        cache = None
        if settings.prompt_cache_enabled:
            cache = InMemoryPromptCache(
                ttl=settings.prompt_cache_ttl,
                sweep_interval=settings.prompt_cache_sweep_interval,
            )

        return cls(transport=transport, cache=cache)

    @property
    def prompt_cache(self) -> PromptCacheStore | None:
        """The prompt cache, or None when caching is disabled."""
        return self._cache

    @property
    def transport(self) -> Transport:
        return self._transport

    async def get_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
        fallback: TextPrompt | None = None,
    ) -> TextPrompt:
        """Get a text prompt by name. See PromptService.get_prompt."""
        return await self._prompts.get_prompt(name, version=version, label=label, fallback=fallback)

    async def get_chat_prompt(
        self,
        name: str,
        version: int | None = None,
        label: str | None = None,
        fallback: ChatPrompt | None = None,
    ) -> ChatPrompt:
        """Get a chat prompt by name. See PromptService.get_chat_prompt."""
        return await self._prompts.get_chat_prompt(name, version=version, label=label, fallback=fallback)

    async def create_score(
        self,
        trace_id: str,
        name: str,
        value: ScoreValue,
        comment: str | None = None,
        observation_id: str | None = None,
    ) -> str | None:
        """Create a score linked to a trace. See ScoreService.create_score."""
        return await self._scores.create_score(
            trace_id,
            name,
            value,
            comment=comment,
            observation_id=observation_id,
        )

    def clear_prompt_cache(self) -> None:
        """Clear the prompt cache."""
        self._prompts.clear_cache()

    async def aclose(self) -> None:
        """Dispose of the prompt cache and close the transport. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._cache is not None:
            self._cache.dispose()
        await self._transport.close()

    async def __aenter__(self) -> "LangfuseClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
