"""Report image rendering package."""

from alokasi.services.image.report_renderer import (
    ReportImageRenderer,
    ReportRenderError,
)

__all__ = [
    "ReportImageRenderer",
    "ReportRenderError",
]
