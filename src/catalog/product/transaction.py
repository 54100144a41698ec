"""Transactional session over a Protean unit of work.

Every multi-document catalog operation runs inside one session. Writes made
through repositories while the session is open join its unit of work and
become visible only when ``commit()`` succeeds.
"""

from contextlib import contextmanager

import structlog
from protean import UnitOfWork

from catalog.shared.errors import TransactionError

logger = structlog.get_logger(__name__)


class TransactionalSession:
    """Handle scoping a set of document writes to one commit/abort unit."""

    def __init__(self) -> None:
        self._uow: UnitOfWork | None = None

    @property
    def in_progress(self) -> bool:
        return self._uow is not None and self._uow.in_progress

    def begin(self) -> "TransactionalSession":
        if self.in_progress:
            raise TransactionError("Session already has a transaction in progress")

        self._uow = UnitOfWork()
        self._uow.start()
        return self

    def commit(self) -> None:
        if not self.in_progress:
            raise TransactionError("No transaction in progress to commit")

        try:
            self._uow.commit()
        except Exception as exc:
            logger.error("Transaction commit failed", error=str(exc))
            try:
                self.abort()
            except TransactionError as abort_exc:
                logger.error("Rollback after failed commit did not complete", error=str(abort_exc))
            raise TransactionError(f"Commit failed: {exc}") from exc

    def abort(self) -> None:
        if not self.in_progress:
            return

        try:
            self._uow.rollback()
        except Exception as exc:
            # Nothing left that this session can release
            self._uow = None
            raise TransactionError(f"Rollback failed: {exc}") from exc

    def end(self) -> None:
        """Release the handle, rolling back a unit of work left open."""
        try:
            self.abort()
        finally:
            self._uow = None


@contextmanager
def transaction():
    """Run the enclosed block as one unit of work.

    Commits on a clean exit. Any exception aborts the unit of work and is
    re-raised unchanged. The session is ended in both cases.
    """
    session = TransactionalSession().begin()
    try:
        yield session
        session.commit()
    except Exception:
        try:
            session.abort()
        except TransactionError as exc:
            logger.error("Rollback after failure did not complete", error=str(exc))
        raise
    finally:
        session.end()
