"""
JSON File Storage Implementation

DESIGN DECISION: A single local JSON file is the storage backend because:
1. No database setup required
2. The user can back it up or inspect it by hand
3. The budget is one small document

The file holds an object mapping each key to its stored text. Writes go
to a temporary file in the same directory that then replaces the old
file, so a crash mid-write never leaves a half-written document behind.

TRADEOFFS:
- Every write rewrites the whole file (fine at this size)
- No locking; one process owns the file
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from alokasi.services.storage.interface import (
    StateStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStateStorage(StateStorageInterface):
    """Key-value slots kept in one UTF-8 JSON file."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {self._path}: {e}")

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except ValueError as e:
            raise StorageReadError(f"Storage file {self._path} is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise StorageReadError(f"Storage file {self._path} does not hold an object")
        return data

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            # Written by something else; hand it back as JSON text
            return json.dumps(value, ensure_ascii=False)
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageReadError:
            # A corrupt file must not block saving the current state
            data = {}
        data[key] = value
        try:
            self._write_all(data)
        except OSError as e:
            raise StorageWriteError(f"Could not write {self._path}: {e}")

    def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        try:
            self._write_all(data)
        except OSError as e:
            raise StorageWriteError(f"Could not write {self._path}: {e}")
        return True
