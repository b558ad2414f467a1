from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from ..chat.errors import OllamaConnectionError
from ..chat.models import ChatRequest, ChatResponse
from .base import ChatTransport
from .models import ModelInfo, ModelList

DEFAULT_BASE_URL = "http://localhost:11434"


def normalize_base_url(url: str) -> str:
    """Strip whitespace and trailing slashes from a user-supplied URL."""
    return url.strip().rstrip("/") or DEFAULT_BASE_URL


class OllamaClient(ChatTransport):
    """Ollama REST client built on httpx.

    Hidden design decisions:
    - One pooled httpx.AsyncClient per base URL
    - No request timeouts (a hung server blocks until the caller cancels)
    - HTTP status and network failures surface as OllamaConnectionError
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, **client_kwargs: Any):
        """Initialize the Ollama client.

        Args:
            base_url: Ollama server URL (default: http://localhost:11434)
            **client_kwargs: Additional kwargs for httpx.AsyncClient
                (e.g. `transport` to inject a mock transport)
        """
        client_kwargs.setdefault("timeout", None)
        self._client = httpx.AsyncClient(
            base_url=normalize_base_url(base_url),
            **client_kwargs
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url).rstrip("/")

    @base_url.setter
    def base_url(self, url: str) -> None:
        self._client.base_url = normalize_base_url(url)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a non-streaming chat request."""
        try:
            response = await self._client.post("/api/chat", json=request.to_payload())
        except httpx.HTTPError as e:
            raise OllamaConnectionError(f"Request failed: {e}") from e

        _raise_for_status(response)

        # ValueError covers bad UTF-8, bad JSON and pydantic validation
        try:
            return ChatResponse.model_validate(response.json())
        except ValueError as e:
            raise OllamaConnectionError(f"Invalid response body: {e}") from e

    @asynccontextmanager
    async def chat_stream(self, request: ChatRequest) -> AsyncIterator[AsyncIterator[bytes]]:
        """Open a streaming chat request and yield its body as byte chunks."""
        try:
            async with self._client.stream(
                "POST", "/api/chat", json=request.to_payload()
            ) as response:
                if response.is_error:
                    await response.aread()
                    _raise_for_status(response)
                yield _iter_body(response)
        except httpx.HTTPError as e:
            raise OllamaConnectionError(f"Request failed: {e}") from e

    async def list_models(self) -> list[ModelInfo]:
        """Fetch installed models from /api/tags."""
        try:
            response = await self._client.get("/api/tags")
        except httpx.HTTPError as e:
            raise OllamaConnectionError(f"Failed to fetch models: {e}") from e

        _raise_for_status(response)

        try:
            data = response.json()
            return ModelList.model_validate({"models": data.get("models") or []}).models
        except (ValueError, AttributeError) as e:
            raise OllamaConnectionError(f"Invalid model list: {e}") from e

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_error:
        raise OllamaConnectionError(
            f"HTTP error! status: {response.status_code}",
            status_code=response.status_code,
        )


async def _iter_body(response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        raise OllamaConnectionError(f"Stream interrupted: {e}") from e
