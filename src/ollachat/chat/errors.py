"""Error taxonomy for the chat session core.

None of these escape ChatSession: they are raised at the call site,
caught there, and turned into a Notice for the user (or, for malformed
stream lines, dropped).
"""


class ChatError(Exception):
    """Base class for chat session errors."""

    title = "Error"


class NoModelSelected(ChatError):
    """A message was sent before any model was selected."""

    title = "No Model Selected"

    def __init__(self, message: str = "Please select a model before sending a message."):
        super().__init__(message)


class RequestInFlight(ChatError):
    """A message was sent while another request is still outstanding."""

    title = "Request In Progress"

    def __init__(self, message: str = "Wait for the current response or stop it first."):
        super().__init__(message)


class OllamaConnectionError(ChatError):
    """The Ollama server could not be reached or answered with a non-2xx status."""

    title = "Connection Error"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedStreamLine(ChatError):
    """A single NDJSON line could not be parsed into a stream chunk."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"Malformed stream line ({reason}): {line[:80]!r}")
        self.line = line
        self.reason = reason
