"""Storage port - key/value persistence injected into the repository."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from lingua_reader.core import StorageQuotaExceededError


class StoragePort(ABC):
    """
    Abstract key/value store holding JSON-encoded strings.

    Implementations (InMemoryStorage, SqliteStorage) may reject writes that
    exceed their capacity by raising StorageQuotaExceededError.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store or overwrite a value.

        Raises:
            StorageQuotaExceededError: If the write would exceed capacity.
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys."""


def check_quota(max_bytes: Optional[int], used_bytes: int, key: str) -> None:
    if max_bytes is not None and used_bytes > max_bytes:
        raise StorageQuotaExceededError(
            f"Writing '{key}' needs {used_bytes} bytes, storage quota is {max_bytes} bytes"
        )


def encoded_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class InMemoryStorage(StoragePort):
    """
    Dictionary-backed storage.

    Used for testing and session-only use. No persistence.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self._store: Dict[str, str] = {}
        self.max_bytes = max_bytes

    def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        used = sum(encoded_size(k, v) for k, v in self._store.items() if k != key)
        check_quota(self.max_bytes, used + encoded_size(key, value), key)
        self._store[key] = value

    def remove(self, key: str) -> None:
        self._store.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._store.keys())
