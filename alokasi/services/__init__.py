"""Services package."""

from alokasi.services.image import (
    ReportImageRenderer,
    ReportRenderError,
)
from alokasi.services.share import (
    MissingRecipientError,
    ShareCancelledError,
    ShareError,
    ShareSinkInterface,
)
from alokasi.services.storage import (
    InMemoryStateStorage,
    JsonFileStateStorage,
    StateStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Image services
    "ReportImageRenderer",
    "ReportRenderError",
    # Share services
    "MissingRecipientError",
    "ShareCancelledError",
    "ShareError",
    "ShareSinkInterface",
    # Storage services
    "InMemoryStateStorage",
    "JsonFileStateStorage",
    "StateStorageInterface",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
