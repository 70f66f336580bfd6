"""Plugin identity model - validates the identity a plugin instance declares."""

from pydantic import BaseModel, Field, field_validator


class PluginManifest(BaseModel):
    """Identity fields read from a constructed plugin instance."""

    name: str = Field(..., min_length=1, description="Unique plugin name")
    version: str = Field(..., min_length=1, description="Plugin version (informational)")
    description: str = Field(default="", description="Plugin description")

    @field_validator("name", "version")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v
