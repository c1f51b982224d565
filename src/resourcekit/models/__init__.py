r"""
Centralized access to the ORM entities.

Importing this package registers every model with `Base.metadata`, which is what
`create_all()` (tests, app startup) relies on.

    from resourcekit.models import AuditedEntity, UserRole
"""

from .entity import AuditedEntity
from .user_role import UserRole

__all__ = [
    "AuditedEntity",
    "UserRole",
]
