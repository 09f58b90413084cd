class StorageError(Exception):
    """Base exception for all storage-related errors."""


class UnsupportedStorageDiskError(StorageError):
    """Raised when settings name a storage disk with no adapter."""


class FileReadError(StorageError):
    """Raised when a stored object cannot be read."""
