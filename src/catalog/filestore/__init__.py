"""File store factory.

Provides get_file_store() / set_file_store() to swap implementations:
- InMemoryFileStore for development and testing (default)
- LocalFileStore when CATALOG_FILE_STORE=local, rooted at CATALOG_MEDIA_ROOT
"""

import os

from catalog.filestore.local_adapter import LocalFileStore
from catalog.filestore.memory_adapter import InMemoryFileStore
from catalog.filestore.port import FileStore, FileStoreError

__all__ = [
    "FileStore",
    "FileStoreError",
    "InMemoryFileStore",
    "LocalFileStore",
    "get_file_store",
    "reset_file_store",
    "set_file_store",
]

_current_store: FileStore | None = None


def _build_default_store() -> FileStore:
    kind = os.getenv("CATALOG_FILE_STORE", "memory").lower()
    if kind == "local":
        return LocalFileStore(os.getenv("CATALOG_MEDIA_ROOT", "media"))
    if kind == "memory":
        return InMemoryFileStore()
    raise ValueError(f"Unknown file store: {kind}")


def get_file_store() -> FileStore:
    """Return the current file store, building the configured default on first use."""
    global _current_store
    if _current_store is None:
        _current_store = _build_default_store()
    return _current_store


def set_file_store(store: FileStore) -> None:
    """Override the active file store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_file_store() -> None:
    """Reset to the configured default store."""
    global _current_store
    _current_store = None
