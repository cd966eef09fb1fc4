from __future__ import annotations

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )


class ErrorOut(BaseModel):
    """Body of every error response."""

    error: str = Field(examples=["Search query is required."])
    details: str | None = Field(
        default=None,
        description="Extra context, e.g. the upstream provider's message. Omitted when empty.",
    )
