"""
Entity marker contract.

Every resource handled by the generic CRUD service mixes in `AuditedEntity`,
which contributes:

    - `id`: UUID primary key, `None` until the persistence layer assigns it on insert
    - `created_at`: stamped once, on first insert
    - `updated_at`: refreshed on every UPDATE issued by the unit of work
    - `deleted_at`: soft-deletion marker (never set by the service itself)

Stamping is done by mapper events (`before_insert` / `before_update`) registered
on the mixin with `propagate=True`, so every mapped subclass inherits it.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import DateTime, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditedEntity:
    """
    Mixin providing identity and audit timestamps.

    Concrete entities must also declare `MERGE_FIELDS`: the explicit, ordered
    tuple of attribute names the partial-update merge walks (see
    `resourcekit.services.merge`). `AUDIT_FIELDS` is meant to be spliced into it.
    """

    AUDIT_FIELDS: ClassVar[tuple[str, ...]] = ("id", "created_at", "updated_at", "deleted_at")
    MERGE_FIELDS: ClassVar[tuple[str, ...]] = AUDIT_FIELDS

    # Primary key: generated client-side at INSERT time (not at construction),
    # so a freshly built entity reports has_id() == False.
    id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def has_id(self) -> bool:
        return self.id is not None

    def has_deleted_at(self) -> bool:
        return self.deleted_at is not None


@event.listens_for(AuditedEntity, "before_insert", propagate=True)
def _stamp_created_at(mapper, connection, target: AuditedEntity) -> None:
    target.created_at = utcnow()


@event.listens_for(AuditedEntity, "before_update", propagate=True)
def _stamp_updated_at(mapper, connection, target: AuditedEntity) -> None:
    target.updated_at = utcnow()
