from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ModelDetails(BaseModel):
    """Format and family information reported for a model."""

    model_config = ConfigDict(frozen=True, extra="allow")

    format: str | None = None
    family: str | None = None
    families: list[str] | None = None
    parameter_size: str | None = None
    quantization_level: str | None = None


class ModelInfo(BaseModel):
    """One entry of the /api/tags model list."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(description="Model tag, e.g. 'llama3.2:latest'")
    model: str | None = Field(default=None, description="Model identifier")
    size: int = Field(default=0, ge=0, description="Size on disk in bytes")
    digest: str | None = None
    modified_at: datetime | None = None
    details: ModelDetails | None = None


class ModelList(BaseModel):
    """Body of a GET /api/tags response."""

    model_config = ConfigDict(extra="allow")

    models: list[ModelInfo] = Field(default_factory=list)
