"""
Unit tests for PromptService: caching, fallback and error policy.
"""

import asyncio
from urllib.parse import parse_qs, unquote, urlsplit

import pytest

from conftest import RecordingTransport, chat_payload, raising, text_payload
from langfuse_client import (
    AuthenticationError,
    ChatPrompt,
    InMemoryPromptCache,
    NotFoundError,
    PreconditionError,
    PromptKey,
    PromptService,
    PromptTypeMismatchError,
    ResponseDecodeError,
    ServerError,
    TextPrompt,
    TransportFailureError,
)
from langfuse_client.services import build_prompt_path


class TestBuildPromptPath:
    """Request path construction."""

    def test_plain_name(self):
        assert build_prompt_path("test-prompt") == "/api/public/v2/prompts/test-prompt"

    def test_version_and_label_order(self):
        path = build_prompt_path("p", version=2, label="staging")
        assert path == "/api/public/v2/prompts/p?version=2&label=staging"

    def test_spaces_are_percent_encoded(self):
        path = build_prompt_path("test prompt", label="my label")
        assert path == "/api/public/v2/prompts/test%20prompt?label=my%20label"

    @pytest.mark.parametrize(
        "name",
        ["test prompt", "test/prompt&name=value", "émoji ✓", "a+b?c#d"],
    )
    def test_name_round_trips(self, name):
        path = build_prompt_path(name, label="my label & more=1")
        parts = urlsplit(path)
        encoded_name = parts.path.rsplit("/", 1)[1]

        assert "/" not in encoded_name
        assert unquote(encoded_name) == name
        assert parse_qs(parts.query) == {"label": ["my label & more=1"]}

    def test_empty_label_is_omitted(self):
        assert build_prompt_path("p", label="") == "/api/public/v2/prompts/p"


class TestPromptServiceCaching:
    """Cache behaviour on the read path."""

    async def test_first_fetch_calls_api_once(self, prompt_service, transport):
        prompt = await prompt_service.get_prompt("test-prompt")

        assert isinstance(prompt, TextPrompt)
        assert prompt.name == "test-prompt"
        assert len(transport.calls) == 1
        assert transport.calls[0][0] == "GET"

    async def test_second_fetch_within_ttl_hits_cache(self, prompt_service, transport, clock):
        first = await prompt_service.get_prompt("test-prompt")
        clock.advance(59)
        second = await prompt_service.get_prompt("test-prompt")

        assert len(transport.calls) == 1
        assert second == first

    async def test_fetch_after_ttl_calls_api_again(self, prompt_service, transport, clock):
        await prompt_service.get_prompt("test-prompt")
        clock.advance(60)
        await prompt_service.get_prompt("test-prompt")

        assert len(transport.calls) == 2

    async def test_clear_forces_refetch(self, prompt_service, transport):
        await prompt_service.get_prompt("test-prompt")
        prompt_service.clear_cache()
        await prompt_service.get_prompt("test-prompt")

        assert len(transport.calls) == 2

    @pytest.mark.parametrize("ttl", [0, -1])
    async def test_non_positive_ttl_always_fetches(self, ttl, transport):
        service = PromptService(transport=transport, cache=InMemoryPromptCache(ttl=ttl))

        for _ in range(3):
            await service.get_prompt("test-prompt")

        assert len(transport.calls) == 3

    async def test_without_cache_always_fetches(self, transport):
        service = PromptService(transport=transport, cache=None)

        await service.get_prompt("test-prompt")
        await service.get_prompt("test-prompt")

        assert len(transport.calls) == 2
        service.clear_cache()

    async def test_distinct_keys_are_cached_separately(self, prompt_service, transport):
        await prompt_service.get_prompt("test-prompt")
        await prompt_service.get_prompt("test-prompt", version=1)
        await prompt_service.get_prompt("test-prompt", label="production")
        await prompt_service.get_prompt("test-prompt", version=1)

        assert transport.paths == [
            "/api/public/v2/prompts/test-prompt",
            "/api/public/v2/prompts/test-prompt?version=1",
            "/api/public/v2/prompts/test-prompt?label=production",
        ]

    async def test_text_and_chat_spaces_do_not_share_entries(self, cache):
        def respond(method, path, body):
            return text_payload("shared") if len(transport.calls) == 1 else chat_payload("shared")

        transport = RecordingTransport(responder=respond)
        service = PromptService(transport=transport, cache=cache)

        text = await service.get_prompt("shared")
        chat = await service.get_chat_prompt("shared")

        assert isinstance(text, TextPrompt)
        assert isinstance(chat, ChatPrompt)
        assert len(transport.calls) == 2

    async def test_encoded_request_path(self, prompt_service, transport):
        await prompt_service.get_prompt("test prompt", label="my label")

        assert transport.paths == ["/api/public/v2/prompts/test%20prompt?label=my%20label"]

    async def test_version_and_label_are_both_sent(self, prompt_service, transport):
        await prompt_service.get_prompt("p", version=3, label="staging")

        assert transport.paths == ["/api/public/v2/prompts/p?version=3&label=staging"]


class TestPromptServiceMaterialization:
    """Payload to entity."""

    async def test_text_prompt_fields(self, cache):
        transport = RecordingTransport(
            responder=text_payload(
                "greeting",
                version=4,
                prompt="Hi {{name}}",
                labels=["production", "latest"],
                tags=["onboarding"],
                config={"model": "gpt-4o", "temperature": 0.3},
            )
        )
        service = PromptService(transport=transport, cache=cache)

        prompt = await service.get_prompt("greeting")

        assert prompt.version == 4
        assert prompt.labels == ("production", "latest")
        assert prompt.tags == ("onboarding",)
        assert prompt.config["model"] == "gpt-4o"
        assert prompt.is_fallback is False
        assert prompt.compile(name="Ada") == "Hi Ada"

    async def test_chat_prompt_fields(self, cache):
        transport = RecordingTransport(responder=chat_payload("support", version=2))
        service = PromptService(transport=transport, cache=cache)

        prompt = await service.get_chat_prompt("support")

        assert prompt.version == 2
        assert prompt.compile(persona="kind", name="Ada") == [
            {"role": "system", "content": "You are kind."},
            {"role": "user", "content": "Hello Ada"},
        ]

    async def test_cached_value_cannot_be_mutated_by_caller(self, prompt_service):
        prompt = await prompt_service.get_prompt("test-prompt")

        with pytest.raises(TypeError):
            prompt.config["injected"] = True  # type: ignore[index]

        again = await prompt_service.get_prompt("test-prompt")
        assert "injected" not in again.config

    async def test_nested_config_of_cached_value_cannot_be_mutated(self, cache):
        transport = RecordingTransport(responder=text_payload(config={"params": {"temperature": 0.2, "stop": ["END"]}}))
        service = PromptService(transport=transport, cache=cache)

        prompt = await service.get_prompt("test-prompt")
        with pytest.raises(TypeError):
            prompt.config["params"]["temperature"] = 9.9  # type: ignore[index]
        with pytest.raises(AttributeError):
            prompt.config["params"]["stop"].append("STOP")  # type: ignore[union-attr]

        again = await service.get_prompt("test-prompt")
        assert len(transport.calls) == 1
        assert again.config["params"]["temperature"] == 0.2
        assert again.config["params"]["stop"] == ("END",)

    async def test_invalid_payload_is_a_decode_error(self, cache):
        transport = RecordingTransport(responder={"unexpected": "shape"})
        service = PromptService(transport=transport, cache=cache)

        with pytest.raises(ResponseDecodeError):
            await service.get_prompt("test-prompt")
        assert len(cache) == 0


class TestPromptServiceFailures:
    """Error classification and fallback policy."""

    @pytest.mark.parametrize(
        "error",
        [
            ServerError("boom", 500),
            NotFoundError("missing", 404),
            AuthenticationError("bad keys", 401),
            TransportFailureError("connection refused"),
        ],
    )
    async def test_fallback_replaces_remote_failure(self, cache, error):
        transport = RecordingTransport(responder=raising(error))
        service = PromptService(transport=transport, cache=cache)
        fallback = TextPrompt.fallback("Hello {{name}}")

        result = await service.get_prompt("test-prompt", fallback=fallback)

        assert result is fallback
        assert len(cache) == 0

    async def test_fallback_is_not_cached(self, cache):
        transport = RecordingTransport(responder=raising(ServerError("boom", 503)))
        service = PromptService(transport=transport, cache=cache)
        fallback = TextPrompt.fallback("x")

        await service.get_prompt("test-prompt", fallback=fallback)
        await service.get_prompt("test-prompt", fallback=fallback)

        assert len(transport.calls) == 2

    async def test_remote_failure_without_fallback_is_raised(self, cache):
        error = NotFoundError("missing", 404, {"message": "Prompt not found"})
        transport = RecordingTransport(responder=raising(error))
        service = PromptService(transport=transport, cache=cache)

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_prompt("test-prompt")

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == {"message": "Prompt not found"}

    async def test_chat_fallback_replaces_remote_failure(self, cache):
        transport = RecordingTransport(responder=raising(ServerError("boom", 500)))
        service = PromptService(transport=transport, cache=cache)
        fallback = ChatPrompt.fallback([("system", "Be brief.")])

        assert await service.get_chat_prompt("support", fallback=fallback) is fallback

    async def test_type_mismatch_bypasses_fallback(self, cache):
        transport = RecordingTransport(responder=chat_payload("test-prompt"))
        service = PromptService(transport=transport, cache=cache)

        with pytest.raises(PromptTypeMismatchError) as exc_info:
            await service.get_prompt("test-prompt", fallback=TextPrompt.fallback("x"))

        assert exc_info.value.expected == "text"
        assert exc_info.value.actual == "chat"
        assert len(cache) == 0

    async def test_chat_request_for_text_prompt_is_mismatch(self, cache):
        transport = RecordingTransport(responder=text_payload("test-prompt"))
        service = PromptService(transport=transport, cache=cache)

        with pytest.raises(PromptTypeMismatchError):
            await service.get_chat_prompt("test-prompt", fallback=ChatPrompt.fallback([("user", "x")]))

    async def test_malformed_payload_uses_fallback(self, cache):
        transport = RecordingTransport(responder={"name": "p"})
        service = PromptService(transport=transport, cache=cache)
        fallback = TextPrompt.fallback("x")

        assert await service.get_prompt("p", fallback=fallback) is fallback

    async def test_text_payload_without_text_is_decode_error(self, cache):
        payload = text_payload("p", prompt=[{"role": "user", "content": "x"}])
        transport = RecordingTransport(responder=payload)
        service = PromptService(transport=transport, cache=cache)

        with pytest.raises(ResponseDecodeError):
            await service.get_prompt("p")

    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_empty_name_is_precondition_failure(self, prompt_service, transport, name):
        with pytest.raises(PreconditionError):
            await prompt_service.get_prompt(name, fallback=TextPrompt.fallback("x"))  # type: ignore[arg-type]

        assert transport.calls == []

    async def test_fallback_of_wrong_kind_is_precondition_failure(self, prompt_service, transport):
        with pytest.raises(PreconditionError):
            await prompt_service.get_prompt("p", fallback=ChatPrompt.fallback([("user", "x")]))  # type: ignore[arg-type]

        assert transport.calls == []


class TestPromptServiceConcurrency:
    """Cancellation and concurrent misses."""

    async def test_cancellation_propagates_and_leaves_cache_empty(self, cache):
        transport = RecordingTransport(responder=text_payload())
        transport.gate = asyncio.Event()
        service = PromptService(transport=transport, cache=cache)

        task = asyncio.create_task(service.get_prompt("test-prompt", fallback=TextPrompt.fallback("x")))
        while not transport.calls:
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(cache) == 0

    async def test_concurrent_misses_both_fetch_and_both_succeed(self, cache):
        versions = iter([1, 2])
        transport = RecordingTransport(responder=lambda m, p, b: text_payload(version=next(versions)))
        transport.gate = asyncio.Event()
        service = PromptService(transport=transport, cache=cache)

        first = asyncio.create_task(service.get_prompt("test-prompt"))
        second = asyncio.create_task(service.get_prompt("test-prompt"))
        while len(transport.calls) < 2:
            await asyncio.sleep(0)
        transport.gate.set()

        results = await asyncio.gather(first, second)

        assert len(transport.calls) == 2
        assert {r.version for r in results} == {1, 2}
        cached = cache.get_text(PromptKey.of("test-prompt"))
        assert cached is not None and cached.version in {1, 2}
