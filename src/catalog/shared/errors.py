"""Catalog error kinds that Protean does not already provide.

Validation failures use ``protean.exceptions.ValidationError`` and missing
documents use ``protean.exceptions.ObjectNotFoundError``. The classes here
cover ownership conflicts, failed commits, and file-store failures that
happen after a commit has already succeeded.
"""


class ConflictError(Exception):
    """A record exists but does not belong to the stated owner."""


class TransactionError(Exception):
    """The document store failed to commit or roll back a unit of work."""


class SideEffectError(Exception):
    """A post-commit file-store call failed.

    The documents are committed and correct; only the stored bytes are
    missing or stale. The error keeps enough to replay the call.
    """

    UPLOAD = "upload"
    DELETE = "delete"

    def __init__(self, action: str, path: str, cause: Exception, file=None) -> None:
        self.action = action
        self.path = path
        self.cause = cause
        self.file = file
        super().__init__(f"Failed to {action} {path}: {cause}")
