"""NDJSON stream ingestion for /api/chat.

Hides how raw response bytes become accumulated message text:
- Incremental UTF-8 decoding across network chunk boundaries
- Line splitting with carry-over of partial lines
- Tolerant per-line parsing (bad lines are dropped, never fatal)
- The fold from stream chunks to content/thinking totals
"""

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .errors import MalformedStreamLine
from .models import StreamChunk

logger = logging.getLogger(__name__)


async def iter_lines(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield complete, non-blank lines from a byte stream.

    A line split across two network chunks is yielded once, whole.
    Whatever remains after the last chunk is treated as a final line.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""

    async for chunk in chunks:
        pending += decoder.decode(chunk)
        *lines, pending = pending.split("\n")
        for line in lines:
            if line.strip():
                yield line

    pending += decoder.decode(b"", final=True)
    if pending.strip():
        yield pending


def parse_stream_line(line: str) -> StreamChunk:
    """Parse one NDJSON line.

    Raises:
        MalformedStreamLine: If the line is not JSON or not a chunk object
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedStreamLine(line, "invalid JSON") from e

    if not isinstance(data, dict):
        raise MalformedStreamLine(line, "not an object")

    try:
        return StreamChunk.model_validate(data)
    except ValidationError as e:
        raise MalformedStreamLine(line, "unexpected shape") from e


async def iter_stream_chunks(chunks: AsyncIterable[bytes]) -> AsyncIterator[StreamChunk]:
    """Lazily parse a byte stream into stream chunks, skipping bad lines."""
    async for line in iter_lines(chunks):
        try:
            yield parse_stream_line(line)
        except MalformedStreamLine as e:
            logger.debug("Skipping stream line: %s", e)


@dataclass
class StreamAccumulator:
    """Running totals for one streamed assistant reply.

    `apply` folds a chunk into the totals and reports whether anything
    changed, so callers only publish a new message when there is news.
    """

    include_thinking: bool = False
    content: str = ""
    thinking: str = ""
    final: StreamChunk | None = None

    def apply(self, chunk: StreamChunk) -> bool:
        changed = False
        message = chunk.message

        if message is not None and message.content:
            self.content += message.content
            changed = True

        if self.include_thinking and message is not None and message.thinking:
            self.thinking += message.thinking
            changed = True

        if chunk.done:
            self.final = chunk

        return changed

    @property
    def stats(self) -> dict[str, Any]:
        """Timing and token counts reported by the final chunk, if any."""
        if self.final is None:
            return {}
        fields = ("done_reason", "total_duration", "prompt_eval_count", "eval_count")
        return {
            name: getattr(self.final, name)
            for name in fields
            if getattr(self.final, name) is not None
        }
