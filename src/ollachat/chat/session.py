"""Chat session state and request lifecycle.

Hides how a conversation is driven:
- Optimistic user message insertion
- Streaming vs. whole-body response handling
- The fold from stream deltas into the open assistant message
- Single-flight enforcement and cooperative cancellation
- Turning failures into user-visible notices

Collaborators use three operations (send_message, stop_generation,
clear_chat) and observe `messages` and `is_loading`.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import NoModelSelected, OllamaConnectionError, RequestInFlight
from .models import ChatRequest, Message, Notice, Role, Severity
from .stream import StreamAccumulator, iter_stream_chunks

if TYPE_CHECKING:
    from ..client.base import ChatTransport
    from ..settings.store import Settings

logger = logging.getLogger(__name__)

Listener = Callable[["ChatSession"], None]
Notifier = Callable[[Notice], None]

SEND_FAILED_DESCRIPTION = "Failed to send message. Check your Ollama connection."

_SEVERITY_LEVELS = {
    Severity.INFORMATION: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def log_notice(notice: Notice) -> None:
    """Default notifier: write the notice to the log."""
    logger.log(_SEVERITY_LEVELS[notice.severity], "%s: %s", notice.title, notice.description)


@dataclass
class _InFlight:
    """Handle on the outstanding request; the task doubles as cancel token."""

    task: asyncio.Future
    aborted: bool = False


class ChatSession:
    """Ordered conversation plus the one request that may be in flight.

    All state changes happen on the event loop thread. Listeners are called
    synchronously after every change with the session as argument.
    """

    def __init__(
        self,
        transport: "ChatTransport",
        settings: "Settings",
        selected_model: str | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._transport = transport
        self._settings = settings
        self.selected_model = selected_model
        self._notifier = notifier or log_notice
        self._messages: list[Message] = []
        self._loading = False
        self._request: _InFlight | None = None
        self._listeners: list[Listener] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the conversation in insertion order."""
        return tuple(self._messages)

    @property
    def is_loading(self) -> bool:
        """True while a request is outstanding."""
        return self._loading

    @property
    def settings(self) -> "Settings":
        """Thinking and streaming flags, read at send time."""
        return self._settings

    @property
    def transport(self) -> "ChatTransport":
        """HTTP boundary used for chat requests."""
        return self._transport

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _notify(self, title: str, description: str, severity: Severity = Severity.ERROR) -> None:
        self._notifier(Notice(title=title, description=description, severity=severity))

    def _set_loading(self, loading: bool) -> None:
        if self._loading != loading:
            self._loading = loading
            self._changed()

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        self._changed()

    def _replace(self, message_id: str, **fields: str | None) -> None:
        # The open message is almost always last, so search from the end.
        for index in range(len(self._messages) - 1, -1, -1):
            if self._messages[index].id == message_id:
                self._messages[index] = self._messages[index].model_copy(update=fields)
                self._changed()
                return
        logger.debug("Dropping update for message %s no longer in the session", message_id)

    def clear_chat(self) -> None:
        """Remove all messages. An in-flight request is left running."""
        self._messages = []
        self._changed()

    def stop_generation(self) -> None:
        """Abort the in-flight request, keeping any partial reply."""
        if self._request is None:
            return
        handle = self._request
        handle.aborted = True
        handle.task.cancel()
        self._request = None
        self._set_loading(False)

    def _check_can_send(self) -> None:
        if not self.selected_model:
            raise NoModelSelected()
        if self._request is not None:
            raise RequestInFlight()

    async def send_message(self, text: str) -> None:
        """Send a user message and collect the assistant's reply.

        Never raises for chat failures: precondition violations and
        connection errors are reported through the notifier, and an abort
        via stop_generation() ends the call quietly.

        Args:
            text: The user's message
        """
        try:
            self._check_can_send()
        except NoModelSelected as e:
            self._notify(e.title, str(e))
            return
        except RequestInFlight as e:
            self._notify(e.title, str(e), Severity.WARNING)
            return

        self._append(Message(role=Role.USER, content=text))

        thinking = self._settings.thinking_mode
        request = ChatRequest(
            model=self.selected_model,
            messages=[message.to_wire() for message in self._messages],
            stream=self._settings.streaming_mode,
            think=True if thinking else None,
        )

        self._set_loading(True)
        handle = _InFlight(task=asyncio.ensure_future(self._exchange(request, thinking)))
        self._request = handle

        try:
            await handle.task
        except asyncio.CancelledError:
            if not handle.aborted:
                raise
            logger.info("Request was aborted")
        except OllamaConnectionError as e:
            logger.error("Error sending message: %s", e)
            self._notify("Error", SEND_FAILED_DESCRIPTION)
        finally:
            if self._request is handle:
                self._request = None
                self._set_loading(False)

    async def _exchange(self, request: ChatRequest, thinking: bool) -> None:
        logger.debug(
            "POST %s/api/chat model=%s stream=%s think=%s messages=%d",
            self._transport.base_url, request.model, request.stream,
            thinking, len(request.messages),
        )
        if request.stream:
            await self._receive_stream(request, thinking)
        else:
            await self._receive_whole(request, thinking)

    async def _receive_stream(self, request: ChatRequest, thinking: bool) -> None:
        accumulator = StreamAccumulator(include_thinking=thinking)

        async with self._transport.chat_stream(request) as body:
            reply = Message(role=Role.ASSISTANT, content="", thinking="" if thinking else None)
            self._append(reply)

            async for chunk in iter_stream_chunks(body):
                if accumulator.apply(chunk):
                    self._replace(
                        reply.id,
                        content=accumulator.content,
                        thinking=accumulator.thinking if thinking else None,
                    )

        if accumulator.stats:
            logger.debug("Stream finished: %s", accumulator.stats)

    async def _receive_whole(self, request: ChatRequest, thinking: bool) -> None:
        response = await self._transport.chat(request)
        self._append(Message(
            role=Role.ASSISTANT,
            content=response.text,
            thinking=response.thinking if thinking else None,
        ))
