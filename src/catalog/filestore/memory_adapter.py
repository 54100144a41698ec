"""Configurable in-memory file store for development and testing.

Keeps bytes in a dict and records every call. Uploads and deletes can be
switched to fail at runtime, optionally only for specific paths, which is
how post-commit failures are simulated.
"""

from catalog.filestore.port import FileStore, FileStoreError


class InMemoryFileStore(FileStore):
    """Configurable fake file store."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.calls: list[dict] = []
        self.fail_uploads: bool = False
        self.fail_deletes: bool = False
        self.failing_paths: set[str] = set()
        self.failure_reason: str = "File store unavailable"

    def configure(
        self,
        fail_uploads: bool = False,
        fail_deletes: bool = False,
        failing_paths=None,
        failure_reason: str = "File store unavailable",
    ) -> None:
        """Configure store behavior at runtime.

        With ``failing_paths`` set, only calls for those paths fail.
        """
        self.fail_uploads = fail_uploads
        self.fail_deletes = fail_deletes
        self.failing_paths = set(failing_paths or ())
        self.failure_reason = failure_reason

    def _should_fail(self, enabled: bool, path: str) -> bool:
        if not enabled:
            return False
        return not self.failing_paths or path in self.failing_paths

    def upload(self, path: str, content: bytes, content_type: str | None = None) -> None:
        self.calls.append({"method": "upload", "path": path, "content_type": content_type, "size": len(content)})

        if self._should_fail(self.fail_uploads, path):
            raise FileStoreError(self.failure_reason)
        self.files[path] = bytes(content)

    def delete(self, path: str) -> None:
        self.calls.append({"method": "delete", "path": path})

        if self._should_fail(self.fail_deletes, path):
            raise FileStoreError(self.failure_reason)
        self.files.pop(path, None)

    def exists(self, path: str) -> bool:
        return path in self.files
