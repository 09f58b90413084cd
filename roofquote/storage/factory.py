from pathlib import Path

from roofquote.config.settings import Settings
from roofquote.storage.base import BaseStorage
from roofquote.storage.exceptions import UnsupportedStorageDiskError
from roofquote.storage.local_adapter import LocalStorage


class StorageFactory:
    """Creates the storage adapter named by ``settings.storage_disk``."""

    DISKS = ("local",)

    @classmethod
    def create(cls, settings: Settings) -> BaseStorage:
        disk = settings.storage_disk.lower()
        if disk == "local":
            return LocalStorage(Path(settings.storage_root))
        raise UnsupportedStorageDiskError(
            f"storage_disk '{disk}' is not supported. Choose from: {list(cls.DISKS)}"
        )
