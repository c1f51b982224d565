"""
Classification of SQLAlchemy IntegrityErrors.

The classifier only answers "which kind of constraint failed, and which one?".
Turning that answer into a service-level exception is the job of
`exceptions.mapper`.
"""
import logging
from enum import Enum

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ConstraintKind(str, Enum):
    UNIQUE = "unique"
    NOT_NULL = "not_null"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
PGCODE_TO_KIND = {
    "23505": ConstraintKind.UNIQUE,
    "23502": ConstraintKind.NOT_NULL,
    "23503": ConstraintKind.FOREIGN_KEY,
    "23514": ConstraintKind.CHECK,
}

# Message fragments used by SQLite / MySQL (and as a fallback for Postgres drivers
# that do not expose a SQLSTATE). Checked in order.
_MESSAGE_HINTS: tuple[tuple[ConstraintKind, tuple[str, ...]], ...] = (
    (ConstraintKind.UNIQUE, ("unique constraint", "unique failed", "unique violation", "duplicate")),
    (ConstraintKind.NOT_NULL, ("not null constraint", "not null", "null value in column")),
    (ConstraintKind.FOREIGN_KEY, ("foreign key constraint", "foreign key", "is not present in table")),
    (ConstraintKind.CHECK, ("check constraint", "check failed")),
)


def _classify_from_sqlstate(orig) -> tuple[ConstraintKind | None, str | None]:
    # psycopg2 exposes `pgcode`; psycopg 3 and asyncpg expose `sqlstate`
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if not code:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None
    constraint_name = constraint_name or getattr(orig, "constraint_name", None)

    kind = PGCODE_TO_KIND.get(code)
    if kind is None:
        logger.warning(
            "integrity.unknown_sqlstate",
            extra={"sqlstate": code, "constraint_name": constraint_name},
        )
        return ConstraintKind.UNKNOWN, constraint_name

    logger.debug("integrity.sqlstate", extra={"sqlstate": code, "constraint_name": constraint_name})
    return kind, constraint_name


def _classify_from_message(msg: str) -> ConstraintKind:
    normalized = (msg or "").lower()
    for kind, hints in _MESSAGE_HINTS:
        if any(hint in normalized for hint in hints):
            return kind

    logger.warning("integrity.unknown_message", extra={"message_snippet": (msg or "")[:200]})
    return ConstraintKind.UNKNOWN


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintKind, str | None]:
    """
    Heuristically classify an IntegrityError.

    Returns:
        (ConstraintKind, constraint name if the driver reported one)
    """
    orig = exc.orig

    kind, constraint_name = _classify_from_sqlstate(orig)
    if kind is not None:
        return kind, constraint_name

    return _classify_from_message(str(orig) if orig is not None else str(exc)), None
