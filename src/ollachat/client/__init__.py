from .base import ChatTransport
from .models import ModelDetails, ModelInfo, ModelList
from .ollama import DEFAULT_BASE_URL, OllamaClient, normalize_base_url

__all__ = [
    "ChatTransport",
    "DEFAULT_BASE_URL",
    "ModelDetails",
    "ModelInfo",
    "ModelList",
    "OllamaClient",
    "normalize_base_url",
]
