"""Helpers for building fake Ollama responses."""
import asyncio
import json
from collections.abc import AsyncIterator, Callable, Iterable


def ndjson_line(content: str | None = None, thinking: str | None = None, done: bool = False, **extra) -> bytes:
    """Encode one streamed /api/chat line."""
    message = {"role": "assistant"}
    if content is not None:
        message["content"] = content
    if thinking is not None:
        message["thinking"] = thinking
    return (json.dumps({"model": "test-model", "message": message, "done": done, **extra}) + "\n").encode()


async def byte_stream(chunks: Iterable[bytes]) -> AsyncIterator[bytes]:
    """Async byte iterator, one network chunk per item."""
    for chunk in chunks:
        await asyncio.sleep(0)
        yield chunk


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until `predicate` holds."""
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)
