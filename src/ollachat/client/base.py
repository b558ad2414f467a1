from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager
from typing import Any

from ..chat.models import ChatRequest, ChatResponse
from .models import ModelInfo


class ChatTransport(ABC):
    """Abstract base class for the Ollama HTTP boundary.

    This module hides the design decision of how requests reach the server.
    Implementations must handle:
    - HTTP client setup and base URL handling
    - Request serialization
    - Mapping transport failures to OllamaConnectionError

    Supports async context manager protocol for proper resource cleanup:
        async with transport:
            models = await transport.list_models()
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Server base URL, without a trailing slash."""

    @abstractmethod
    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a non-streaming chat request and return the whole response.

        Args:
            request: Chat request with `stream` set to False

        Returns:
            Parsed response body

        Raises:
            OllamaConnectionError: On network failure, non-2xx status or an
                undecodable body
        """

    @abstractmethod
    def chat_stream(
        self, request: ChatRequest
    ) -> AbstractAsyncContextManager[AsyncIterator[bytes]]:
        """Open a streaming chat request.

        The context manager yields the raw response body as byte chunks,
        exactly as they arrive from the network. Leaving the context closes
        the response.

        Raises:
            OllamaConnectionError: On network failure or non-2xx status,
                either on entry or while iterating
        """

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        """Fetch the models installed on the server.

        Raises:
            OllamaConnectionError: On network failure or non-2xx status
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "ChatTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
