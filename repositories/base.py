import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, PersistenceError

logger = logging.getLogger(__name__)


def _reason(exc: SQLAlchemyError) -> str:
    # DBAPI errors carry the driver message on .orig
    return str(getattr(exc, "orig", None) or exc).strip()


class SessionRepository:
    """Data access bound to one request-scoped Session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def guard(self, action: str) -> Iterator[Session]:
        """Run ``action`` against the session, rolling back and raising PersistenceError on failure."""
        try:
            yield self.db
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning(f"{action}: constraint violated ({_reason(exc)})")
            raise ConflictError(f"{action} failed: {_reason(exc)}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"{action}: database error ({_reason(exc)})")
            raise PersistenceError(f"{action} failed: {_reason(exc)}") from exc
