"""In-memory object store."""

from backend.app.storage.store import ObjectNotFoundError, validate_object_path


class InMemoryObjectStore:
    """In-memory implementation of ObjectStore."""

    def __init__(self) -> None:
        self._objects: dict[str, bytes] = {}

    async def put(self, path: str, content: bytes) -> None:
        """Store the object."""
        self._objects[validate_object_path(path)] = content

    async def get(self, path: str) -> bytes:
        """Return the object."""
        try:
            return self._objects[path]
        except KeyError as e:
            raise ObjectNotFoundError(path) from e

    async def delete(self, path: str) -> None:
        """Remove the object if present."""
        self._objects.pop(path, None)

    async def exists(self, path: str) -> bool:
        """Check for the object."""
        return path in self._objects
