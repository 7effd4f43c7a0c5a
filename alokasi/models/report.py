"""
Report Models

Results returned by the export and share flows. The flows never raise
for collaborator failures they can recover from; they describe what
happened in one of these instead.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ShareMethod(str, Enum):
    """How a report ended up being shared."""
    NATIVE = "native"  # share sink accepted title, text and image
    LINK = "link"      # fell back to the messaging deep link


class ExportResult(BaseModel):
    """Result of rendering the report image."""

    export_id: UUID = Field(
        default_factory=uuid4
    )
    exported_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    success: bool
    filename: Optional[str] = Field(
        default=None,
        description="Download filename, e.g. Report-Januari-2025.jpg"
    )
    mime_type: str = Field(
        default="image/jpeg"
    )
    image_bytes: Optional[bytes] = Field(
        default=None,
        repr=False,
        description="Encoded image when rendering succeeded"
    )
    error_message: Optional[str] = None

    @property
    def size_bytes(self) -> int:
        return len(self.image_bytes) if self.image_bytes else 0


class ShareResult(BaseModel):
    """Result of the share flow."""

    share_id: UUID = Field(
        default_factory=uuid4
    )
    method: ShareMethod
    title: str
    text: str = Field(
        ...,
        description="Plain-text body that was shared or embedded in the link"
    )
    link_url: Optional[str] = Field(
        default=None,
        description="Deep link when the link fallback was used"
    )
    image_attached: bool = False
    fallback_reason: Optional[str] = Field(
        default=None,
        description="Why the native share was not used"
    )
