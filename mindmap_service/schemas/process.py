from pydantic import BaseModel, Field
from typing import Literal, Optional


# ── Request ──────────────────────────────────────────────────────────────────

class ProcessRequest(BaseModel):
    """Request body for mind map generation."""
    content: Optional[str] = Field(default=None, description="Raw text, or a page URL when type is 'url'")
    type: Literal["url", "text"] = Field(default="text", description="How to interpret content")


# ── Error ────────────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """
    Standard error envelope.
    `details` carries the underlying failure message, `type` its category.
    """
    error: str
    details: Optional[str] = None
    type: Optional[str] = None
