"""Object store interface for uploaded document files."""

import time
from pathlib import PurePosixPath
from typing import Protocol
from uuid import UUID


class StorageError(Exception):
    """Object store operation failed."""

    pass


class ObjectNotFoundError(StorageError):
    """No object stored at the given path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Object not found: {path}")
        self.path = path


class ObjectStore(Protocol):
    """Binary object storage addressed by path."""

    async def put(self, path: str, content: bytes) -> None:
        """Store ``content`` at ``path``, replacing any existing object."""
        ...

    async def get(self, path: str) -> bytes:
        """Return the object at ``path``.

        Raises:
            ObjectNotFoundError: If nothing is stored there.
        """
        ...

    async def delete(self, path: str) -> None:
        """Remove the object at ``path``; missing objects are ignored."""
        ...

    async def exists(self, path: str) -> bool:
        """Return True if an object is stored at ``path``."""
        ...


def safe_file_name(file_name: str) -> str:
    """Drop any directory components a client sent with the file name."""
    name = PurePosixPath(file_name.replace("\\", "/")).name
    return name or "upload"


def build_object_path(owner_id: UUID, file_name: str, now_ms: int | None = None) -> str:
    """Storage path ``{owner_id}/{timestamp_ms}_{file_name}``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{owner_id}/{now_ms}_{safe_file_name(file_name)}"


def validate_object_path(path: str) -> str:
    """Reject absolute paths and parent-directory segments.

    Raises:
        StorageError: If the path could escape the store root.
    """
    parts = PurePosixPath(path).parts
    if not parts or path.startswith("/") or any(part in ("..", ".") for part in parts):
        raise StorageError(f"Invalid object path: {path!r}")
    return path
