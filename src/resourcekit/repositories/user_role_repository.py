"""
UserRole repository.

Extends BaseRepository with the lookups that are specific to roles.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from resourcekit.models.user_role import UserRole
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRoleRepository(BaseRepository[UserRole]):
    """
    Repository for UserRole entity operations.

    All generic operations (find_by_id, save, find_all, ...) come from
    `BaseRepository[UserRole]`.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(UserRole, db)

    async def find_by_name(self, name: str) -> UserRole | None:
        """
        Get a role by its unique name.

        The name is stripped before matching; matching is case-sensitive.
        """
        result = await self.db.execute(
            select(UserRole).where(UserRole.name == name.strip())
        )
        role = result.scalar_one_or_none()

        logger.debug(f"Retrieved UserRole by name: {name} (found={role is not None})")
        return role
