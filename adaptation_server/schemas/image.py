"""
Image upload API schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UploadResponse(BaseModel):
    """
    Response model for image uploads.

    file_id is None and note is set when uploads are disabled and a
    placeholder URL is returned instead.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    file_id: str | None = Field(default=None, description="Blob store id of the stored image")
    url: str = Field(..., description="URL the image can be fetched from")
    note: str | None = Field(default=None, description="Explanation when a placeholder was returned")


class DebugResponse(BaseModel):
    """Database diagnostics."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    connected: bool
    environment_count: int
    creature_count: int


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: str = "ok"
