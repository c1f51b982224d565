from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from typing import ClassVar

from resourcekit.database.base import Base
from .entity import AuditedEntity


class UserRole(AuditedEntity, Base):
    """
    SQLAlchemy model for a user role.

    Example resource wired through the generic CRUD service. Identity and audit
    timestamps come from `AuditedEntity`.
    """
    __tablename__ = "user_role"

    MERGE_FIELDS: ClassVar[tuple[str, ...]] = AuditedEntity.AUDIT_FIELDS + ("name", "description")

    # Role name (must be unique and non-null)
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False
    )

    # Optional free-text description
    description: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<UserRole(id={self.id!r}, name={self.name!r})>"
