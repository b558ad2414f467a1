"""Pytest configuration and shared fixtures."""
from collections.abc import Callable

import httpx
import pytest

from ollachat.chat import ChatSession, Notice
from ollachat.client import OllamaClient
from ollachat.settings import Settings, create_settings_store

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings():
    """Settings backed by an in-memory store (thinking off, streaming on)."""
    return Settings(create_settings_store("memory"))


@pytest.fixture
def notices():
    """List that collects notices emitted during a test."""
    return []


@pytest.fixture
def make_client():
    """Build an OllamaClient whose HTTP traffic goes to `handler`."""
    def _make(handler: Handler) -> OllamaClient:
        return OllamaClient(
            base_url="http://ollama.test",
            transport=httpx.MockTransport(handler),
        )
    return _make


@pytest.fixture
def make_session(make_client, settings, notices):
    """Build a ChatSession over a mock transport."""
    def _make(handler: Handler, model: str | None = "test-model") -> ChatSession:
        def notifier(notice: Notice) -> None:
            notices.append(notice)

        return ChatSession(
            transport=make_client(handler),
            settings=settings,
            selected_model=model,
            notifier=notifier,
        )
    return _make


@pytest.fixture
def sample_tags():
    """Return a /api/tags response body."""
    return {
        "models": [
            {
                "name": "llama3.2:latest",
                "model": "llama3.2:latest",
                "size": 2019393189,
                "digest": "a80c4f17acd5",
                "modified_at": "2025-01-10T09:21:13.617913+01:00",
                "details": {
                    "format": "gguf",
                    "family": "llama",
                    "families": ["llama"],
                    "parameter_size": "3.2B",
                    "quantization_level": "Q4_K_M",
                },
            },
            {
                "name": "qwen3:8b",
                "model": "qwen3:8b",
                "size": 5225388164,
                "digest": "500a1f067a9f",
            },
        ]
    }
