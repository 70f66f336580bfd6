"""Request models for admin API endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PluginLoadRequest(BaseModel):
    """Request body for loading a plugin file."""

    source: str = Field(..., min_length=1, description="Plugin file name inside the plugins directory")

    @field_validator("source")
    @classmethod
    def source_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("source cannot be empty")
        return v.strip()


class BotConfigUpdate(BaseModel):
    """Request body for updating the top-level bot configuration.

    Unknown keys are kept and persisted as-is.
    """

    model_config = ConfigDict(extra="allow")

    prefix: Optional[str] = Field(None, min_length=1, description="Command prefix")
    port: Optional[int] = Field(None, description="Admin HTTP port")
    theme: Optional[str] = Field(None, description="Embed colour theme")
