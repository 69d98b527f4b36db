"""
Shared fixtures and fakes for the Langfuse client tests.
"""

import asyncio
from typing import Any, Callable

import pytest

from langfuse_client import InMemoryPromptCache, PromptService, ScoreService


def text_payload(name: str = "test-prompt", version: int = 1, prompt: str = "Test content", **extra: Any) -> dict:
    """Prompt API payload for a text prompt."""
    payload = {
        "id": "prompt-id",
        "name": name,
        "version": version,
        "type": "text",
        "prompt": prompt,
        "labels": ["production"],
        "tags": [],
        "config": {},
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
    }
    payload.update(extra)
    return payload


def chat_payload(name: str = "chat-prompt", version: int = 1, messages: list | None = None, **extra: Any) -> dict:
    """Prompt API payload for a chat prompt."""
    payload = text_payload(name=name, version=version, **extra)
    payload["type"] = "chat"
    payload["prompt"] = messages or [
        {"role": "system", "content": "You are {{persona}}."},
        {"role": "user", "content": "Hello {{name}}"},
    ]
    return payload


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport:
    """Transport fake that records every call.

    ``responder`` receives (method, path, body) and returns the payload or
    raises. ``gate``, when set, blocks every call until it is released.
    """

    def __init__(self, responder: Callable[[str, str, Any], Any] | Any = None):
        self.calls: list[tuple[str, str, Any]] = []
        self.responder = responder
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def send(self, method: str, path: str, body: Any = None) -> Any:
        self.calls.append((method, path, body))
        if self.gate is not None:
            await self.gate.wait()
        if callable(self.responder):
            return self.responder(method, path, body)
        return self.responder

    async def close(self) -> None:
        self.closed = True

    @property
    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]


def raising(exc: BaseException) -> Callable[..., Any]:
    """Responder that raises exc on every call."""

    def _raise(*_args: Any) -> Any:
        raise exc

    return _raise


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    cache = InMemoryPromptCache(ttl=60, clock=clock)
    yield cache
    cache.dispose()


@pytest.fixture
def transport():
    return RecordingTransport(responder=lambda method, path, body: text_payload())


@pytest.fixture
def prompt_service(transport, cache):
    return PromptService(transport=transport, cache=cache)


@pytest.fixture
def score_service():
    transport = RecordingTransport(responder={"id": "score-1"})
    return ScoreService(transport=transport), transport
