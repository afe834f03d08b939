"""Service-level exceptions and database error classification.

Every failure a request can end in is expressed as a subclass of
``ProductServiceError`` carrying the HTTP status and the message safe to show
to the caller. The API layer renders them uniformly.
"""

from __future__ import annotations

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

# SQLSTATE codes of interest (PostgreSQL class 23, integrity constraint violation)
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"

# SQLite reports constraint failures in the message only
_SQLITE_MESSAGES = {
    "UNIQUE constraint failed": UNIQUE_VIOLATION,
    "FOREIGN KEY constraint failed": FOREIGN_KEY_VIOLATION,
    "CHECK constraint failed": CHECK_VIOLATION,
}


class ProductServiceError(Exception):
    """Base class for all errors surfaced by the product service."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ProductServiceError):
    """Request input failed validation before reaching the store."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(ProductServiceError):
    """No row matches the lookup key."""

    status_code = 404
    default_message = "Product not found"


class ConflictError(ProductServiceError):
    """A unique constraint was violated."""

    status_code = 409
    default_message = "Duplicate entry detected"


class InvalidReferenceError(ProductServiceError):
    """A foreign-key constraint was violated."""

    status_code = 400
    default_message = "Invalid foreign key reference"


class ConstraintError(ProductServiceError):
    """A check constraint was violated."""

    status_code = 400
    default_message = "Check constraint violation"


class InternalError(ProductServiceError):
    """Any other store or runtime failure."""

    status_code = 500
    default_message = "Internal server error"


_ERRORS_BY_SQLSTATE: dict[str, type[ProductServiceError]] = {
    UNIQUE_VIOLATION: ConflictError,
    FOREIGN_KEY_VIOLATION: InvalidReferenceError,
    CHECK_VIOLATION: ConstraintError,
}


def sqlstate_of(exc: BaseException) -> str | None:
    """Return the SQLSTATE reported by the driver for ``exc``, if any."""
    orig = exc.orig if isinstance(exc, DBAPIError) else exc

    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    for attr in ("pgcode", "sqlstate"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)

    message = str(orig)
    for fragment, code in _SQLITE_MESSAGES.items():
        if fragment in message:
            return code
    return None


def map_database_error(exc: SQLAlchemyError) -> ProductServiceError:
    """Translate a store error into the service error taxonomy."""
    error_cls = _ERRORS_BY_SQLSTATE.get(sqlstate_of(exc) or "", InternalError)
    return error_cls()
