"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Model picker contents and refresh button
- Message rendering, including the collapsible thinking trace
- Incremental sync of the chat view with session state
- Input history and send/stop button states
- Log rendering and level filtering
"""

from collections import deque
from datetime import datetime

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click, Key
from textual.message import Message as TextualMessage
from textual.widgets import Button, Collapsible, RichLog, Select, Static, TextArea

from ..chat import Message, Role
from ..client import ModelInfo
from .config import INPUT_HISTORY_MAX_SIZE, LOG_TIMESTAMP_FORMAT, TYPING_INDICATOR, LogLevel
from .formatting import (
    message_body,
    message_header,
    model_option_label,
    thinking_title,
    truncate_log_message,
)


class ModelBar(Horizontal):
    """Model picker with a refresh button."""

    class RefreshRequested(TextualMessage):
        """Posted when the user asks for the model list to be re-fetched."""

    def compose(self) -> ComposeResult:
        yield Select[str]([], prompt="Select a model...", id="model-select")
        yield Button("Refresh", id="refresh-btn", variant="default").with_tooltip(
            "Re-fetch models from the server (Ctrl+R)"
        )

    def set_models(self, models: list[ModelInfo], selected: str | None) -> None:
        """Replace the picker options and select `selected` if it is listed."""
        select = self.query_one("#model-select", Select)
        select.set_options((model_option_label(model), model.name) for model in models)
        if selected and any(model.name == selected for model in models):
            select.value = selected

    def set_fetching(self, fetching: bool) -> None:
        self.query_one("#model-select", Select).disabled = fetching
        button = self.query_one("#refresh-btn", Button)
        button.disabled = fetching
        button.label = "Loading..." if fetching else "Refresh"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "refresh-btn":
            event.stop()
            self.post_message(self.RefreshRequested())


class MessageView(Vertical):
    """One chat message. Clicking it copies the raw text to the clipboard."""

    def __init__(self, message: Message, *args, thinking_active: bool = False, **kwargs) -> None:
        role_class = "user-message" if message.role == Role.USER else "assistant-message"
        super().__init__(*args, classes=f"chat-message {role_class}", **kwargs)
        self._message = message
        self._thinking_active = False
        self._header = Static(message_header(message), classes="message-header")
        self._thinking_text = Static("", classes="thinking-content")
        self._thinking = Collapsible(
            self._thinking_text,
            title=thinking_title(False),
            collapsed=True,
            classes="thinking",
        )
        self._body = Static("", classes="message-content")
        self.update_message(message, thinking_active)

    @property
    def message(self) -> Message:
        return self._message

    @property
    def thinking_active(self) -> bool:
        return self._thinking_active

    def compose(self) -> ComposeResult:
        yield self._header
        if self._message.role == Role.ASSISTANT:
            yield self._thinking
        yield self._body

    def update_message(self, message: Message, thinking_active: bool = False) -> None:
        """Show the latest totals for this message."""
        self._message = message
        self._thinking_active = thinking_active
        thinking = message.thinking or ""
        self._thinking.display = bool(thinking) or thinking_active
        self._thinking.title = thinking_title(thinking_active)
        self._thinking_text.update(Text(thinking, style="italic"))
        self._body.update(message_body(message))

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self._message.content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation view kept in step with the chat session."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, MessageView] = {}

    def compose(self) -> ComposeResult:
        yield Static(
            "[b]Welcome to ollachat[/b]\n\n"
            "Start a conversation with your local model.\n"
            "Select a model and type your message below.",
            id="welcome",
        )
        indicator = Static(TYPING_INDICATOR, id="typing-indicator")
        indicator.display = False
        yield indicator

    def sync(self, messages: tuple[Message, ...], loading: bool, thinking_mode: bool) -> None:
        """Bring the view in line with the session's messages.

        Views are matched by message id: unknown ids are mounted, known ids
        updated in place, and views whose message is gone are removed.
        """
        current_ids = {message.id for message in messages}
        for message_id in list(self._views):
            if message_id not in current_ids:
                self._views.pop(message_id).remove()

        indicator = self.query_one("#typing-indicator", Static)
        last_index = len(messages) - 1
        for index, message in enumerate(messages):
            thinking_active = (
                index == last_index
                and loading
                and thinking_mode
                and message.role == Role.ASSISTANT
            )
            view = self._views.get(message.id)
            if view is None:
                view = MessageView(message, thinking_active=thinking_active)
                self._views[message.id] = view
                self.mount(view, before=indicator)
            elif view.message is not message or view.thinking_active != thinking_active:
                view.update_message(message, thinking_active)

        self.query_one("#welcome").display = not messages
        indicator.display = loading
        self.border_subtitle = f"{len(messages)} messages" if messages else "Conversation history"
        self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for view in reversed(list(self._views.values())):
            if view.message.role == Role.ASSISTANT:
                return view.message.content
        return None


class InputHistory:
    """Previously submitted inputs, browsed from the newest backwards."""

    def __init__(self, max_size: int = INPUT_HISTORY_MAX_SIZE) -> None:
        self._entries: deque[str] = deque(maxlen=max_size)
        self._cursor: int | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, text: str) -> None:
        """Record a submission (consecutive duplicates are kept once)."""
        if not self._entries or self._entries[-1] != text:
            self._entries.append(text)
        self._cursor = None

    def older(self) -> str | None:
        """Step one entry back. None if there is nothing to recall."""
        if not self._entries:
            return None
        if self._cursor is None:
            self._cursor = len(self._entries) - 1
        elif self._cursor > 0:
            self._cursor -= 1
        return self._entries[self._cursor]

    def newer(self) -> str | None:
        """Step one entry forward.

        Stepping past the newest entry ends browsing and returns "" so the
        input is cleared. None when not browsing.
        """
        if self._cursor is None:
            return None
        if self._cursor >= len(self._entries) - 1:
            self._cursor = None
            return ""
        self._cursor += 1
        return self._entries[self._cursor]


class ChatInputBar(Horizontal):
    """Message entry with Send and Stop buttons.

    Send and Stop swap places while a reply is generating; the text area
    is locked until a model is selected.
    """

    class Submitted(TextualMessage):
        """Posted with the stripped text when the user sends a message."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class StopRequested(TextualMessage):
        """Posted when the user presses Stop."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history = InputHistory()
        self._busy = False

    def compose(self) -> ComposeResult:
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        text_area.highlight_cursor_line = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Send message (Ctrl+J)"
        )
        stop = Button("Stop", id="stop-btn", variant="error").with_tooltip(
            "Stop generating (Esc)"
        )
        stop.display = False
        yield stop

    def set_state(self, loading: bool, has_model: bool) -> None:
        """Swap Send/Stop while loading and lock input without a model."""
        self._busy = loading
        send = self.query_one("#send-btn", Button)
        stop = self.query_one("#stop-btn", Button)
        send.display = not loading
        stop.display = loading
        send.disabled = not has_model
        self.query_one("#chat-input", TextArea).disabled = not has_model

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "send-btn":
            self._submit()
        elif event.button.id == "stop-btn":
            self.post_message(self.StopRequested())

    def on_key(self, event: Key) -> None:
        """Ctrl+J sends; Up/Down at the edges of the text browse history.

        Terminals do not report modifiers together with Enter, so
        Ctrl+Enter is not available.
        """
        text_area = self.query_one("#chat-input", TextArea)
        if event.key == "ctrl+j":
            self._submit()
        elif event.key == "up" and text_area.cursor_location == (0, 0):
            self._recall(self._history.older())
        elif event.key == "down" and text_area.cursor_location == text_area.document.end:
            self._recall(self._history.newer())
        else:
            return
        event.prevent_default()
        event.stop()

    def _recall(self, text: str | None) -> None:
        if text is not None:
            self.query_one("#chat-input", TextArea).text = text

    def _submit(self) -> None:
        if self._busy:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value:
            return
        self._history.add(value)
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Application log records, filtered by level.

    Starts hidden; shown by --log-level or toggled with Ctrl+D. Each line
    is `time LEVEL [component] message`, with the component taken from the
    last part of the logger name.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Hidden"

    _LEVEL_STYLES = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "bold red",
    }

    _COMPONENT_STYLES = {
        "session": "green",
        "stream": "bright_green",
        "ollama": "magenta",
        "directory": "bright_magenta",
        "store": "bright_blue",
        "json_file": "bright_blue",
        "app": "cyan",
    }

    def __init__(self, *args, log_level: int = LogLevel.WARNING, **kwargs) -> None:
        super().__init__(*args, markup=False, highlight=False, auto_scroll=True, wrap=False, **kwargs)
        self._threshold = log_level
        self.display = False

    @property
    def log_level(self) -> int:
        return self._threshold

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._threshold = level
        self._refresh_subtitle()

    def _refresh_subtitle(self) -> None:
        self.border_subtitle = f"Level: {LogLevel.name(self._threshold)}" if self.display else "Hidden"

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Append one record unless it is below the panel's threshold."""
        if level < self._threshold:
            return
        line = Text.assemble(
            (datetime.now().strftime(LOG_TIMESTAMP_FORMAT) + " ", "dim"),
            (f"{LogLevel.name(level):<5} ", self._LEVEL_STYLES.get(min(level, LogLevel.ERROR), "white")),
            (f"[{component}] ", self._COMPONENT_STYLES.get(component, "white")),
            truncate_log_message(message),
        )
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._refresh_subtitle()

    def hide(self) -> None:
        self.display = False
        self._refresh_subtitle()

    def toggle(self) -> bool:
        """Flip visibility and return whether the panel is now shown."""
        if self.display:
            self.hide()
        else:
            self.show()
        return bool(self.display)
