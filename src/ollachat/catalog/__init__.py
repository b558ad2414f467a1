from .directory import ModelDirectory, format_model_size

__all__ = ["ModelDirectory", "format_model_size"]
