"""File store adapter writing below a local media root."""

from pathlib import Path

import structlog

from catalog.filestore.port import FileStore, FileStoreError

logger = structlog.get_logger(__name__)


class LocalFileStore(FileStore):
    """Stores files on the local filesystem under ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug("LocalFileStore initialised", root=str(self.root))

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise FileStoreError(f"Path {path} escapes the media root")
        return target

    def upload(self, path: str, content: bytes, content_type: str | None = None) -> None:  # noqa: ARG002
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise FileStoreError(f"Could not write {path}: {exc}") from exc

        logger.info("Stored file", path=path, size=len(content))

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise FileStoreError(f"Could not delete {path}: {exc}") from exc

        logger.info("Deleted file", path=path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()
