"""Chat session core for ollachat.

Owns the conversation, issues /api/chat requests, folds streamed NDJSON
into message state and supports cancellation.
"""

from .errors import (
    ChatError,
    MalformedStreamLine,
    NoModelSelected,
    OllamaConnectionError,
    RequestInFlight,
)
from .models import ChatRequest, ChatResponse, Message, Notice, Role, Severity, StreamChunk
from .session import ChatSession, Listener, Notifier, log_notice
from .stream import StreamAccumulator, iter_lines, iter_stream_chunks, parse_stream_line

__all__ = [
    "ChatError",
    "ChatRequest",
    "ChatResponse",
    "ChatSession",
    "Listener",
    "MalformedStreamLine",
    "Message",
    "NoModelSelected",
    "Notice",
    "Notifier",
    "OllamaConnectionError",
    "RequestInFlight",
    "Role",
    "Severity",
    "StreamAccumulator",
    "StreamChunk",
    "iter_lines",
    "iter_stream_chunks",
    "log_notice",
    "parse_stream_line",
]
