from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from resourcekit.database.session import get_async_session
from resourcekit.services.user_role_service import UserRoleService


def get_user_role_service(db: AsyncSession = Depends(get_async_session)) -> UserRoleService:
    # One service per request, bound to the request's session
    return UserRoleService(db)
