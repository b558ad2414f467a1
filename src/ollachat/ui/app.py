"""Main Textual TUI application.

Orchestrates the UI components and hands user actions to the chat
session. Holds no chat logic of its own: it calls send/stop/clear and
re-renders from the session's messages and loading flag.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Select

from ..catalog import ModelDirectory
from ..chat import ChatSession
from .callbacks import PanelLogHandler, ToastNotifier
from .config import THEME_DARK, THEME_LIGHT, LogLevel
from .screens import SettingsChoice, SettingsScreen
from .styles import APP_CSS
from .themes import OLLACHAT_DARK, OLLACHAT_LIGHT
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ModelBar

if TYPE_CHECKING:
    from ..client import OllamaClient
    from ..settings import Settings

logger = logging.getLogger(__name__)


class OllamaChatApp(App):
    """Textual TUI for chatting with an Ollama server."""

    CSS = APP_CSS
    TITLE = "ollachat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("escape", "stop_generation", "Stop"),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+r", "refresh_models", "Models"),
        Binding("ctrl+s", "open_settings", "Settings"),
        Binding("ctrl+t", "toggle_theme", "Theme"),
        Binding("ctrl+y", "copy_last_response", "Copy Response", priority=True),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
    ]

    def __init__(
        self,
        client: "OllamaClient",
        settings: "Settings",
        model: str | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._settings = settings
        self._log_level = log_level
        notifier = ToastNotifier(self)
        self._session = ChatSession(
            transport=client,
            settings=settings,
            selected_model=model,
            notifier=notifier,
        )
        self._directory = ModelDirectory(client, notifier=notifier)
        self._unsubscribe = self._session.subscribe(self._on_session_changed)
        self._log_handler: PanelLogHandler | None = None
        self._ui_ready = False

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ModelBar(id="model-bar")
        yield ChatHistoryWidget(id="chat-history")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Register themes and start the first model fetch."""
        self.register_theme(OLLACHAT_DARK)
        self.register_theme(OLLACHAT_LIGHT)
        self.theme = THEME_DARK

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = PanelLogHandler(log_panel, app=self)
        logging.getLogger("ollachat").addHandler(self._log_handler)

        # --log-level shows the panel from the start
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            logger.info("Log panel enabled with level: %s", self._log_level.upper())
        self._apply_logger_level(log_panel.log_level)

        self._ui_ready = True
        self._update_subtitle()
        self._on_session_changed(self._session)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        self._refresh_models()

    def on_unmount(self) -> None:
        """Detach from the session and the logging tree."""
        self._ui_ready = False
        self._unsubscribe()
        if self._log_handler is not None:
            logging.getLogger("ollachat").removeHandler(self._log_handler)
            self._log_handler = None
        self._session.stop_generation()

    def _apply_logger_level(self, level: int) -> None:
        logging.getLogger("ollachat").setLevel(level)

    def _update_subtitle(self) -> None:
        model = self._session.selected_model or "no model"
        flags = []
        if self._settings.streaming_mode:
            flags.append("streaming")
        if self._settings.thinking_mode:
            flags.append("thinking")
        self.sub_title = " | ".join([model, self._client.base_url, *flags])

    def _on_session_changed(self, session: ChatSession) -> None:
        """Re-render from session state; called after every state change."""
        if not self._ui_ready:
            return
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.sync(session.messages, session.is_loading, self._settings.thinking_mode)
        self.query_one("#chat-input-bar", ChatInputBar).set_state(
            loading=session.is_loading,
            has_model=bool(session.selected_model),
        )

    @work(group="models")
    async def _refresh_models(self) -> None:
        """Fetch the model list and keep or pick a selection."""
        bar = self.query_one("#model-bar", ModelBar)
        bar.set_fetching(True)
        try:
            selected = await self._directory.refresh(self._session.selected_model)
        finally:
            bar.set_fetching(False)
        self._session.selected_model = selected
        bar.set_models(self._directory.models, selected)
        self._update_subtitle()
        self._on_session_changed(self._session)

    @work(group="chat")
    async def _send(self, text: str) -> None:
        await self._session.send_message(text)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Send the submitted text to the model."""
        if event.value:
            self._send(event.value)

    def on_chat_input_bar_stop_requested(self, event: ChatInputBar.StopRequested) -> None:
        self.action_stop_generation()

    def on_model_bar_refresh_requested(self, event: ModelBar.RefreshRequested) -> None:
        self.action_refresh_models()

    def on_select_changed(self, event: Select.Changed) -> None:
        """Track the model picked in the model bar."""
        if event.select.id != "model-select":
            return
        value = event.value
        if value is Select.BLANK or value is None:
            return
        if value != self._session.selected_model:
            self._session.selected_model = str(value)
            logger.info("Selected model %s", value)
            self._update_subtitle()
            self._on_session_changed(self._session)

    def action_stop_generation(self) -> None:
        """Stop the reply currently being generated."""
        if self._session.is_loading:
            self._session.stop_generation()
            self.notify("Stopped", severity="warning", timeout=2)

    def action_clear_chat(self) -> None:
        """Clear the conversation (not while a reply is in progress)."""
        if self._session.is_loading:
            self.notify("Wait for the reply or stop it first", severity="warning", timeout=2)
            return
        self._session.clear_chat()
        self.notify("Chat cleared", timeout=2)

    def action_refresh_models(self) -> None:
        if not self._directory.is_loading:
            self._refresh_models()

    def action_open_settings(self) -> None:
        screen = SettingsScreen(
            thinking_mode=self._settings.thinking_mode,
            streaming_mode=self._settings.streaming_mode,
            base_url=self._client.base_url,
        )
        self.push_screen(screen, self._apply_settings)

    def _apply_settings(self, choice: SettingsChoice | None) -> None:
        if choice is None:
            return
        self._settings.thinking_mode = choice.thinking_mode
        self._settings.streaming_mode = choice.streaming_mode
        if choice.base_url != self._client.base_url:
            self._client.base_url = choice.base_url
            logger.info("Ollama URL changed to %s", self._client.base_url)
            self.action_refresh_models()
        self._update_subtitle()
        self.notify("Settings saved", timeout=2)

    def action_toggle_theme(self) -> None:
        self.theme = THEME_LIGHT if self.theme == THEME_DARK else THEME_DARK

    def action_toggle_debug(self) -> None:
        """Show or hide the log panel."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Put the newest assistant reply on the clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    client: "OllamaClient",
    settings: "Settings",
    model: str | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        client: Ollama client (closed by the caller)
        settings: Persisted thinking/streaming settings
        model: Model to select on startup; None picks the first listed
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = OllamaChatApp(
        client=client,
        settings=settings,
        model=model,
        log_level=log_level,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
