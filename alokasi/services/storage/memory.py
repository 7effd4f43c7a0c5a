"""In-memory storage, for tests and throwaway sessions."""

from typing import Optional

from alokasi.services.storage.interface import StateStorageInterface


class InMemoryStateStorage(StateStorageInterface):
    """Key-value slots in a dict. Counts writes so tests can check write-through."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
