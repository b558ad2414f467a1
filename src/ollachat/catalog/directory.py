"""Model directory: the list of models installed on the server.

Hides how the list is fetched and refreshed, and what happens when the
server cannot be reached (the previous list is kept and the user is told).
"""

import logging
from typing import TYPE_CHECKING

from ..chat.errors import OllamaConnectionError
from ..chat.models import Notice
from ..chat.session import Notifier, log_notice
from ..client.models import ModelInfo

if TYPE_CHECKING:
    from ..client.base import ChatTransport

logger = logging.getLogger(__name__)

CONNECTION_ERROR_DESCRIPTION = (
    "Failed to connect to Ollama. Make sure Ollama is running on the specified URL."
)

_BYTES_PER_GB = 1024 * 1024 * 1024


def format_model_size(size_bytes: int) -> str:
    """Format a size in bytes as gigabytes with one decimal, e.g. '3.8GB'."""
    return f"{size_bytes / _BYTES_PER_GB:.1f}GB"


class ModelDirectory:
    """Cached list of available models.

    Example:
        directory = ModelDirectory(transport)
        session.selected_model = await directory.refresh(session.selected_model)
    """

    def __init__(self, transport: "ChatTransport", notifier: Notifier | None = None):
        self._transport = transport
        self._notifier = notifier or log_notice
        self._models: list[ModelInfo] = []
        self._loading = False

    @property
    def models(self) -> list[ModelInfo]:
        return list(self._models)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def names(self) -> list[str]:
        return [model.name for model in self._models]

    def get(self, name: str) -> ModelInfo | None:
        for model in self._models:
            if model.name == name:
                return model
        return None

    async def refresh(self, selected: str | None = None) -> str | None:
        """Re-fetch the model list.

        Args:
            selected: Currently selected model name, if any

        Returns:
            The model that should be selected afterwards: `selected` when
            set, otherwise the first listed model (None if there is none).
            On connection failure the list and selection are unchanged.
        """
        self._loading = True
        try:
            models = await self._transport.list_models()
        except OllamaConnectionError as e:
            logger.error("Error fetching models: %s", e)
            self._notifier(Notice(title="Connection Error", description=CONNECTION_ERROR_DESCRIPTION))
            return selected
        finally:
            self._loading = False

        self._models = models
        logger.info("Found %d model(s) at %s", len(models), self._transport.base_url)

        if not selected and models:
            return models[0].name
        return selected
