"""
Declarative base shared by every ORM entity of the service layer.

Entities that take part in the generic CRUD lifecycle subclass `Base` and mix
in `resourcekit.models.entity.AuditedEntity`:

    class UserRole(AuditedEntity, Base):
        __tablename__ = "user_role"
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Deterministic constraint names on every backend. Postgres reports them back
# on integrity errors, where they end up in RepositoryError.constraint
# (e.g. "uq_user_role_name").
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(column_0_label)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
