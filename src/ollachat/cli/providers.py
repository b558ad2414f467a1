"""Provider factory functions for CLI.

Centralizes creation of the Ollama client, settings and chat session from
environment variables. Hides configuration details from command
implementations.
"""

import os

from rich.console import Console

from ..chat import ChatSession, Notice, Notifier, Severity
from ..client import DEFAULT_BASE_URL, OllamaClient
from ..settings import Settings, create_settings_store

# Default console for output
_console = Console()

_SEVERITY_STYLES = {
    Severity.INFORMATION: "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


def get_base_url(url: str | None = None) -> str:
    """Resolve the Ollama base URL.

    Environment variables:
        OLLAMA_URL: Ollama server URL (default: http://localhost:11434)
    """
    return url or os.getenv("OLLAMA_URL", DEFAULT_BASE_URL)


def get_default_model(model: str | None = None) -> str | None:
    """Resolve the initially selected model.

    Environment variables:
        OLLAMA_MODEL: Model name (default: first model the server lists)
    """
    return model or os.getenv("OLLAMA_MODEL") or None


def get_client(url: str | None = None) -> OllamaClient:
    """Create an Ollama client for the resolved base URL."""
    return OllamaClient(base_url=get_base_url(url))


def get_settings() -> Settings:
    """Create settings from environment variables.

    Environment variables:
        OLLACHAT_SETTINGS_BACKEND: 'file' or 'memory' (default: file)
        OLLACHAT_SETTINGS_PATH: Settings file path
            (default: ~/.config/ollachat/settings.json)
    """
    backend = os.getenv("OLLACHAT_SETTINGS_BACKEND", "file").lower()
    config = {}
    path = os.getenv("OLLACHAT_SETTINGS_PATH")
    if backend == "file" and path:
        config["path"] = path
    return Settings(create_settings_store(backend, **config))


def console_notifier(console: Console | None = None) -> Notifier:
    """Build a notifier that prints notices to a Rich console."""
    con = console or _console

    def _notify(notice: Notice) -> None:
        style = _SEVERITY_STYLES[notice.severity]
        con.print(f"[{style}]{notice.title}:[/{style}] {notice.description}")

    return _notify


def get_session(
    client: OllamaClient,
    settings: Settings,
    model: str | None = None,
    notifier: Notifier | None = None,
) -> ChatSession:
    """Create a chat session wired to the given client and settings."""
    return ChatSession(
        transport=client,
        settings=settings,
        selected_model=get_default_model(model),
        notifier=notifier,
    )
