"""Unit tests for object stores and storage paths."""

import uuid
from pathlib import Path

import pytest

from backend.app.storage.inmemory import InMemoryObjectStore
from backend.app.storage.local import LocalObjectStore
from backend.app.storage.store import (
    ObjectNotFoundError,
    StorageError,
    build_object_path,
    safe_file_name,
    validate_object_path,
)

OWNER = uuid.UUID("00000000-0000-0000-0000-000000000002")


def test_build_object_path() -> None:
    """Test paths are ``{owner}/{ms}_{name}``."""
    assert build_object_path(OWNER, "invoice.pdf", now_ms=1700000000000) == f"{OWNER}/1700000000000_invoice.pdf"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("../../etc/passwd", "passwd"), ("C:\\scans\\bill.png", "bill.png"), ("", "upload")],
)
def test_safe_file_name_strips_directories(raw: str, expected: str) -> None:
    """Test client-supplied directories are dropped."""
    assert safe_file_name(raw) == expected


@pytest.mark.parametrize("path", ["/abs/file.pdf", "owner/../other/file.pdf", ""])
def test_validate_object_path_rejects_escapes(path: str) -> None:
    """Test paths that could escape the store root are rejected."""
    with pytest.raises(StorageError):
        validate_object_path(path)


@pytest.mark.asyncio
async def test_local_store_round_trip(tmp_path: Path) -> None:
    """Test put, get, exists and delete on disk."""
    store = LocalObjectStore(tmp_path)
    path = f"{OWNER}/1_invoice.pdf"

    await store.put(path, b"%PDF-1.4")

    assert await store.exists(path)
    assert await store.get(path) == b"%PDF-1.4"
    assert (tmp_path / str(OWNER) / "1_invoice.pdf").is_file()

    await store.delete(path)
    await store.delete(path)  # missing objects are ignored

    assert not await store.exists(path)
    with pytest.raises(ObjectNotFoundError):
        await store.get(path)


@pytest.mark.asyncio
async def test_in_memory_store_missing_object() -> None:
    """Test reading a missing object raises ObjectNotFoundError."""
    store = InMemoryObjectStore()

    with pytest.raises(ObjectNotFoundError):
        await store.get("nobody/missing.pdf")
