import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .integrity_classifier import classify_integrity_error, ConstraintKind
from .base import PersistenceConflictError

logger = logging.getLogger(__name__)

# Client-facing text is fixed by the problem handler; these messages only reach logs.
_KIND_MESSAGES = {
    ConstraintKind.UNIQUE: "{model} already exists",
    ConstraintKind.NOT_NULL: "Missing required field for {model}",
    ConstraintKind.FOREIGN_KEY: "{model} references a missing entity",
    ConstraintKind.CHECK: "{model} violates a check constraint",
    ConstraintKind.UNKNOWN: "{model} database integrity error",
}

# -----------------------
# Column extraction
# -----------------------

# Each pattern captures the involved column list in the "cols" group:
#   Postgres: 'null value in column "title" violates not-null constraint'
#   Postgres: 'DETAIL:  Key (book_id)=(...) already exists.'
#   SQLite:   'UNIQUE constraint failed: loans.book_id'
_COLUMN_PATTERNS = (
    re.compile(r'null value in column "(?P<cols>[^"]+)"', re.IGNORECASE),
    re.compile(r'key \((?P<cols>[^)]+)\)=', re.IGNORECASE),
    re.compile(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', re.IGNORECASE | re.MULTILINE),
)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """Best-effort list of the columns named in the driver message."""
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _COLUMN_PATTERNS:
        m = pattern.search(msg)
        if m:
            # "loans.book_id" -> "book_id"; '"title"' -> "title"
            return [c.strip().strip('"').split(".")[-1] for c in m.group("cols").split(",")]
    return None


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(exc: IntegrityError, model_name: str | None = None) -> PersistenceConflictError:
    """
    Translate a SQLAlchemy IntegrityError into a PersistenceConflictError.
    Populates `.kind`, `.fields` and `.constraint` where possible.
    """
    kind, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"

    # INFO: a conflict is an expected outcome of concurrent or repeated writes
    logger.info(
        "mapper.integrity_conflict",
        extra={
            "model": model_part,
            "kind": kind.value,
            "fields": columns,
            "constraint": constraint_name,
        },
    )
    # Raw DB text stays at DEBUG
    logger.debug("mapper.integrity_raw", extra={"model": model_part, "raw": str(exc.orig)})

    return PersistenceConflictError(
        _KIND_MESSAGES[kind].format(model=model_part),
        kind=kind.value,
        fields=columns,
        constraint=constraint_name,
    )


# -----------------------
# Async context manager to DRY error handling around writes
# -----------------------
@asynccontextmanager
async def db_error_handler(db: AsyncSession, model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.db, self.model.__name__):
            ... DB ops that may raise IntegrityError ...
    Rolls back on any error. IntegrityErrors become PersistenceConflictError;
    everything else is re-raised unchanged.
    """
    try:
        yield
    except IntegrityError as exc:
        try:
            await db.rollback()
        except Exception:
            logger.exception("Failed to rollback session after IntegrityError", extra={"model": model_name})
        raise map_integrity_error(exc, model_name) from exc
    except Exception:
        try:
            await db.rollback()
        except Exception:
            logger.exception("Failed to rollback session after unexpected error", extra={"model": model_name})
        raise
