"""
Gap-filling merge used by partial updates (PATCH).

The incoming entity is the target: whatever the caller supplied (non-None) is
kept, every None is filled from the stored source. Fields are walked from an
explicit, per-entity tuple (`MERGE_FIELDS`), never discovered reflectively.

Example:
    stored   = UserRole(id=X, name="admin", description="root access", created_at=T)
    incoming = UserRole(id=X, name=None,    description="full access", created_at=None)

    merge_source_to_target(stored, incoming, UserRole.MERGE_FIELDS)
    # incoming -> id=X, name="admin", description="full access", created_at=T

The merge is shallow (nested objects are shared by reference) and idempotent.
"""
from typing import Any, Iterable


def merge_source_to_target(source: Any, target: Any, fields: Iterable[str]) -> None:
    """Copy `source.<f>` into `target.<f>` for every field `f` that is None on target."""
    for name in fields:
        if getattr(target, name) is None:
            setattr(target, name, getattr(source, name))


def merge_fields_of(entity: Any) -> tuple[str, ...]:
    """Return the declared merge field tuple of an entity instance or class."""
    fields = getattr(entity, "MERGE_FIELDS", None)
    if not fields:
        name = entity.__name__ if isinstance(entity, type) else type(entity).__name__
        raise TypeError(f"{name} does not declare MERGE_FIELDS")
    return tuple(fields)
