"""
ollachat: A chat client for models served by a local Ollama server.

The package is split so that each module hides one design decision:
the chat session core, the HTTP transport, the model directory, settings
persistence and the terminal UI.
"""

__version__ = "0.1.0"

from .catalog import ModelDirectory, format_model_size
from .chat import ChatSession, Message, Notice, Role
from .client import ChatTransport, OllamaClient
from .settings import Settings, create_settings_store

__all__ = [
    "ChatSession",
    "ChatTransport",
    "Message",
    "ModelDirectory",
    "Notice",
    "OllamaClient",
    "Role",
    "Settings",
    "create_settings_store",
    "format_model_size",
]
