"""Filesystem-backed object store."""

import asyncio
import logging
from pathlib import Path

from backend.app.storage.store import ObjectNotFoundError, StorageError, validate_object_path

logger = logging.getLogger(__name__)


class LocalObjectStore:
    """Object store rooted at a local directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        target = (self._root / validate_object_path(path)).resolve()
        if self._root not in target.parents:
            raise StorageError(f"Invalid object path: {path!r}")
        return target

    async def put(self, path: str, content: bytes) -> None:
        """Write the object, creating the owner directory if needed."""
        target = self._resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"Failed to store {path}: {e}") from e
        logger.info(f"Stored object {path} ({len(content)} bytes)")

    async def get(self, path: str) -> bytes:
        """Read the object."""
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(path) from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    async def delete(self, path: str) -> None:
        """Remove the object if present."""
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e
        logger.info(f"Deleted object {path}")

    async def exists(self, path: str) -> bool:
        """Check for the object on disk."""
        return await asyncio.to_thread(self._resolve(path).is_file)
