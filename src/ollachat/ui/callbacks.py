"""Bridges from the core to the TUI.

Hides the details of how the TUI receives updates from outside the widget
tree:
- Log records are forwarded to the log panel
- Notices from the chat session become Textual notifications

Uses call_from_thread when a record arrives from a worker thread.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any

from ..chat import Notice
from .config import NOTIFY_TIMEOUT

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import DebugPanel


class PanelLogHandler(logging.Handler):
    """logging.Handler that writes records to the log panel."""

    def __init__(self, panel: "DebugPanel", app: "App | None" = None) -> None:
        super().__init__(level=logging.DEBUG)
        self.panel = panel
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any) -> None:
        """Call a function in a thread-safe manner for UI updates."""
        if self.app is not None and self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args)
        else:
            func(*args)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            component = record.name.rsplit(".", 1)[-1]
            message = record.getMessage()
            if record.exc_info:
                message = f"{message} ({record.exc_info[1]!r})"
            self._call_thread_safe(self.panel.add_entry, component, message, record.levelno)
        except Exception:
            self.handleError(record)


class ToastNotifier:
    """Notifier that shows chat notices as Textual notifications."""

    def __init__(self, app: "App", timeout: float = NOTIFY_TIMEOUT) -> None:
        self.app = app
        self.timeout = timeout

    def __call__(self, notice: Notice) -> None:
        self.app.notify(
            notice.description,
            title=notice.title,
            severity=notice.severity.value,
            timeout=self.timeout,
        )
