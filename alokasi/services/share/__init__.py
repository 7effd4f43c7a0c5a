"""Report sharing package."""

from alokasi.services.share.whatsapp import (
    DETAIL_HEADING,
    MissingRecipientError,
    ShareCancelledError,
    ShareError,
    ShareSinkInterface,
    build_detail_lines,
    build_share_message,
    build_whatsapp_link,
)

__all__ = [
    "DETAIL_HEADING",
    # Interface
    "ShareSinkInterface",
    # Exceptions
    "MissingRecipientError",
    "ShareCancelledError",
    "ShareError",
    # Message building
    "build_detail_lines",
    "build_share_message",
    "build_whatsapp_link",
]
