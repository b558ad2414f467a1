from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class Severity(str, Enum):
    """Severity of a user-visible notice."""

    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"


class Message(BaseModel):
    """A single message in the conversation.

    Messages are frozen. While an assistant reply streams in, the session
    swaps the list entry for a copy carrying the accumulated totals.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Role = Field(description="Who wrote the message")
    content: str = Field(default="", description="Accumulated message text")
    timestamp: datetime = Field(default_factory=datetime.now)
    thinking: str | None = Field(
        default=None,
        description="Accumulated reasoning trace (thinking mode only)"
    )

    def to_wire(self) -> dict[str, str]:
        """Map to the {role, content} shape the chat endpoint expects."""
        return {"role": self.role.value, "content": self.content}


class Notice(BaseModel):
    """A user-visible notification raised by the core."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    severity: Severity = Severity.ERROR


class ChunkMessage(BaseModel):
    """The `message` object of one streamed line."""

    model_config = ConfigDict(extra="ignore")

    role: str | None = None
    content: str | None = None
    thinking: str | None = None


class StreamChunk(BaseModel):
    """One NDJSON line of a streaming /api/chat response.

    Only `message` is validated. The bookkeeping fields are taken as sent,
    so an odd `done` or statistic never costs the line its text.
    """

    model_config = ConfigDict(extra="allow")

    model: Any = None
    message: ChunkMessage | None = None
    done: Any = None
    done_reason: Any = None
    total_duration: Any = None
    prompt_eval_count: Any = None
    eval_count: Any = None


class ChatResponse(BaseModel):
    """A non-streaming /api/chat response.

    Older servers and /api/generate style proxies answer with a top-level
    `response` string instead of a `message` object.
    """

    model_config = ConfigDict(extra="allow")

    model: str | None = None
    message: ChunkMessage | None = None
    response: str | None = None

    @property
    def text(self) -> str:
        if self.message is not None and self.message.content:
            return self.message.content
        return self.response or ""

    @property
    def thinking(self) -> str | None:
        if self.message is not None and self.message.thinking:
            return self.message.thinking
        return None


class ChatRequest(BaseModel):
    """Body of a POST /api/chat request."""

    model: str
    messages: list[dict[str, str]]
    stream: bool = True
    think: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize, leaving out `think` unless thinking mode asked for it."""
        return self.model_dump(exclude_none=True)
