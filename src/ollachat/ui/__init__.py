"""Terminal UI module for ollachat.

Provides a Textual-based TUI over the chat session core.

Module structure (each module hides a design decision):
- config.py: Constants (log levels, labels, theme names)
- formatting.py: Display text for messages, models and log lines
- widgets.py: Custom widgets (model bar, chat view, input bar, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (settings)
- callbacks.py: Core integration (log records, notices)
- app.py: Application orchestration (user interaction flow)
"""

from .app import OllamaChatApp, run_textual_tui
from .callbacks import PanelLogHandler, ToastNotifier
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, InputHistory, MessageView, ModelBar

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "InputHistory",
    "LogLevel",
    "MessageView",
    "ModelBar",
    "OllamaChatApp",
    "PanelLogHandler",
    "ToastNotifier",
    "run_textual_tui",
]
