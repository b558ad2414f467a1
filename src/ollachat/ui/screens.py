"""Modal screens for the TUI.

This module hides the design decisions about:
- Settings dialog appearance (CSS, layout)
- Which controls edit which setting
- Keyboard shortcuts for dialogs

To change how settings are edited, modify only this file.
"""

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static, Switch


@dataclass(frozen=True)
class SettingsChoice:
    """Values confirmed in the settings dialog."""

    thinking_mode: bool
    streaming_mode: bool
    base_url: str


class SettingsScreen(ModalScreen[SettingsChoice | None]):
    """Modal dialog for thinking/streaming modes and the server URL.

    Dismisses with a SettingsChoice on Save, or None on Cancel/Escape.
    """

    CSS = """
    SettingsScreen {
        align: center middle;
        background: $background 70%;
    }

    #settings-dialog {
        width: 64;
        height: auto;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #settings-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    .setting-row {
        height: 3;
        align: left middle;
    }

    .setting-row Label {
        width: 1fr;
        padding: 1 0;
    }

    .setting-hint {
        color: $text-muted;
        padding: 0 0 1 0;
    }

    #url-input {
        margin-bottom: 1;
    }

    #settings-buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }

    #settings-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, thinking_mode: bool, streaming_mode: bool, base_url: str) -> None:
        super().__init__()
        self._thinking_mode = thinking_mode
        self._streaming_mode = streaming_mode
        self._base_url = base_url

    def compose(self) -> ComposeResult:
        with Vertical(id="settings-dialog"):
            yield Static("Settings", id="settings-title")
            with Horizontal(classes="setting-row"):
                yield Label("Thinking mode")
                yield Switch(value=self._thinking_mode, id="thinking-switch")
            yield Static("Show the model's reasoning before its answer", classes="setting-hint")
            with Horizontal(classes="setting-row"):
                yield Label("Streaming mode")
                yield Switch(value=self._streaming_mode, id="streaming-switch")
            yield Static("Show the reply while it is being generated", classes="setting-hint")
            yield Label("Ollama URL")
            yield Input(value=self._base_url, placeholder="http://localhost:11434", id="url-input")
            with Horizontal(id="settings-buttons"):
                yield Button("Save", id="btn-save", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def _choice(self) -> SettingsChoice:
        return SettingsChoice(
            thinking_mode=self.query_one("#thinking-switch", Switch).value,
            streaming_mode=self.query_one("#streaming-switch", Switch).value,
            base_url=self.query_one("#url-input", Input).value.strip() or self._base_url,
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self.dismiss(self._choice())
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(self._choice())

    def action_cancel(self) -> None:
        self.dismiss(None)
