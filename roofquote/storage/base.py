from abc import ABC, abstractmethod


class BaseStorage(ABC):
    """Contract for object storage adapters."""

    @abstractmethod
    def download(self, key: str) -> bytes:
        """Return the full content stored under ``key``.

        Raises:
            FileReadError: if the object is missing or unreadable.
        """
