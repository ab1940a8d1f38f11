"""
core/exceptions.py

Typed domain errors. Services raise these, middlewares/error_handler.py turns
them into JSON responses. Callers branch on ``kind`` (or the subclass), never on
the message text.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STATE = "state"
    PERSISTENCE = "persistence"


# HTTP status per error kind
STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STATE: 400,
    ErrorKind.PERSISTENCE: 500,
}


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        identifier: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.identifier = identifier

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_dict(self) -> dict:
        body = {"error": self.message, "code": self.kind.name}
        if self.field is not None:
            body["field"] = self.field
        if self.identifier is not None:
            body["id"] = self.identifier
        return body


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""

    kind = ErrorKind.VALIDATION


class NotFoundError(DomainError):
    """Raised when an identifier does not exist."""

    kind = ErrorKind.NOT_FOUND


class StateError(DomainError):
    """Raised on an illegal attendance transition."""

    kind = ErrorKind.STATE


class PersistenceError(DomainError):
    """Raised when the underlying store fails."""

    kind = ErrorKind.PERSISTENCE


class ConflictError(PersistenceError):
    """A unique constraint rejected the write."""
