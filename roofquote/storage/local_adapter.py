from pathlib import Path, PurePosixPath

from roofquote.storage.base import BaseStorage
from roofquote.storage.exceptions import FileReadError


def object_path(root: Path, key: str) -> Path:
    """Map a storage key such as ``org/job/scope.pdf`` below ``root``.

    Keys that would escape the root are rejected.
    """
    relative = PurePosixPath(key.lstrip("/"))
    if not relative.parts or ".." in relative.parts:
        raise FileReadError(f"Invalid storage key: {key!r}")
    return root.joinpath(*relative.parts)


class LocalStorage(BaseStorage):
    """Reads objects from a directory tree on the local filesystem."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def download(self, key: str) -> bytes:
        path = object_path(self._root, key)
        if not path.is_file():
            raise FileReadError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Could not read {path}: {exc}") from exc
