"""Text formatting utilities for the TUI.

Hides how messages, models and log lines are turned into display text.
"""

from rich.markdown import Markdown
from rich.text import Text

from ..catalog import format_model_size
from ..chat import Message, Role
from ..client import ModelInfo
from .config import (
    LOG_MAX_MESSAGE_LENGTH,
    MESSAGE_TIMESTAMP_FORMAT,
    THINKING_TITLE_ACTIVE,
    THINKING_TITLE_DONE,
)


def message_header(message: Message) -> str:
    """Header line shown above a message, e.g. '> You [12:01:33]'."""
    if message.role == Role.USER:
        icon, author = ">", "You"
    else:
        icon, author = "<", "Assistant"
    return f"{icon} {author} [{message.timestamp.strftime(MESSAGE_TIMESTAMP_FORMAT)}]"


def message_body(message: Message) -> Markdown | Text:
    """Renderable for the message text.

    User input is shown verbatim; assistant replies are rendered as
    Markdown since models answer with fenced code, lists and emphasis.
    """
    if message.role == Role.USER:
        return Text(message.content)
    return Markdown(message.content or " ")


def thinking_title(active: bool) -> str:
    return THINKING_TITLE_ACTIVE if active else THINKING_TITLE_DONE


def model_option_label(model: ModelInfo) -> str:
    """Label for the model picker: name plus formatted size."""
    return f"{model.name}  ({format_model_size(model.size)})"


def truncate_log_message(message: str, limit: int = LOG_MAX_MESSAGE_LENGTH) -> str:
    if len(message) <= limit:
        return message
    return message[:limit] + "..."
