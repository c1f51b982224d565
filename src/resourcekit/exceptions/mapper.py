"""
Translate database failures into service-level errors.

Repositories wrap their writes in `db_error_handler(...)`:

    async with db_error_handler(self.model.__name__):
        self.db.add(entity)
        await self.db.flush()

- IntegrityError   -> DuplicateError / RepositoryError (classified, sanitized message)
- ResourceError    -> re-raised untouched (already a service-level error)
- anything else    -> RepositoryError, logged with stack trace

The session is never rolled back here: the unit of work opened by the service
(`BaseRepository.transaction()`) owns the transaction and discards it when the
exception leaves its block.
"""
import re
import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError

from .integrity_classifier import classify_integrity_error, ConstraintKind
from .base import DuplicateError, RepositoryError, ResourceError

logger = logging.getLogger(__name__)

# -----------------------
# Column extraction helpers
# -----------------------

_COLUMN_PATTERNS = (
    # Postgres not-null: 'null value in column "name" violates not-null constraint'
    re.compile(r'null value in column "(?P<cols>[^"]+)"', re.IGNORECASE),
    # Postgres detail: 'Key (name)=(admin) already exists.'
    re.compile(r'key \((?P<cols>[^)]+)\)=', re.IGNORECASE),
    # SQLite: 'UNIQUE constraint failed: user_role.name' / 'NOT NULL constraint failed: user_role.name'
    re.compile(r'(?:UNIQUE|NOT NULL) constraint failed: (?P<cols>.+)$', re.IGNORECASE),
)


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of column names from the DB message (Postgres, SQLite).
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _COLUMN_PATTERNS:
        m = pattern.search(msg)
        if m:
            return [c.strip().strip('"').split(".")[-1] for c in m.group("cols").split(",")]
    return None


# -----------------------
# Mapper
# -----------------------

def map_integrity_error(exc: IntegrityError, model_name: str | None = None) -> RepositoryError:
    """
    Build the service-level exception for an IntegrityError.
    Populates `.fields` and `.constraint` where possible; never leaks raw DB text.
    """
    kind, constraint_name = classify_integrity_error(exc)
    columns = extract_columns_from_integrity(exc)
    model_part = model_name or "Record"
    detail = f"field(s): {', '.join(columns)}" if columns else (
        f"constraint: {constraint_name}" if constraint_name else None
    )

    # Duplicates are expected client-level scenarios -> INFO, no stack trace
    log_extra = {"model": model_part, "fields": columns, "constraint": constraint_name}

    if kind is ConstraintKind.UNIQUE:
        logger.info("mapper.duplicate_detected", extra=log_extra)
        message = f"{model_part} already exists for {detail}" if detail else f"{model_part} already exists"
        return DuplicateError(message, fields=columns, constraint=constraint_name)

    if kind is ConstraintKind.NOT_NULL:
        logger.info("mapper.not_null_violation", extra=log_extra)
        message = f"Missing required {detail} for {model_part}" if detail else f"Missing required field for {model_part}"
        return RepositoryError(message, fields=columns, constraint=constraint_name)

    if kind is ConstraintKind.FOREIGN_KEY:
        logger.info("mapper.foreign_key_violation", extra=log_extra)
        return RepositoryError(f"{model_part} references a missing entity", fields=columns, constraint=constraint_name)

    if kind is ConstraintKind.CHECK:
        logger.info("mapper.check_constraint_failure", extra=log_extra)
        return RepositoryError(f"{model_part} business rule violated (check constraint).", constraint=constraint_name)

    logger.warning("mapper.unknown_integrity_error", extra=log_extra)
    return RepositoryError(f"{model_part} database integrity error.", constraint=constraint_name)


@asynccontextmanager
async def db_error_handler(model_name: str | None = None):
    """
    Usage:
        async with db_error_handler(self.model.__name__):
            ... DB ops that may raise IntegrityError ...
    """
    try:
        yield
    except IntegrityError as exc:
        raise map_integrity_error(exc, model_name) from exc
    except ResourceError:
        raise
    except Exception as exc:
        # Unexpected: keep the stack trace in logs, hide internals from callers.
        logger.exception("repo.unexpected_db_error", extra={"model": model_name})
        raise RepositoryError(f"Failed to operate on {model_name or 'database'}") from exc
