"""
Repository layer initialization module.

    from resourcekit.repositories import BaseRepository, UserRoleRepository
"""

from .base_repository import BaseRepository
from .user_role_repository import UserRoleRepository

__all__ = [
    "BaseRepository",
    "UserRoleRepository",
]
