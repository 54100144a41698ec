"""File store port (abstract interface).

Defines the contract every file store adapter implements. The catalog only
ever uploads bytes to a generated path and deletes by that path; each call
is assumed atomic on its own, and no call takes part in a document
transaction.
"""

from abc import ABC, abstractmethod


class FileStoreError(Exception):
    """Raised by adapters when an upload or delete cannot be completed."""


class FileStore(ABC):
    """Abstract durable byte storage keyed by path."""

    @abstractmethod
    def upload(self, path: str, content: bytes, content_type: str | None = None) -> None:
        """Store ``content`` at ``path``, replacing anything already there."""
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the file at ``path``. Deleting a missing file is not an error."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether a file is stored at ``path``."""
        ...
