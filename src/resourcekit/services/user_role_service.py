"""
UserRole service: the generic CrudService wired with the default collaborators.

    service = UserRoleService(session)
    role = await service.create(UserRoleDTO(name="admin"))
    await service.patch(UserRoleDTO(id=role.id, description="all permissions"))
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from resourcekit.exceptions.base import InvalidArgumentError
from resourcekit.mappers.pydantic_mapper import PydanticEntityMapper
from resourcekit.models.user_role import UserRole
from resourcekit.query.criteria import CriteriaQueryBuilder
from resourcekit.repositories.user_role_repository import UserRoleRepository
from resourcekit.schemas.user_role import UserRoleDTO
from resourcekit.validators.model_validator import ModelValidator
from .crud_service import CrudService

logger = logging.getLogger(__name__)


class UserRoleService(CrudService[UserRole, UserRoleDTO]):

    def __init__(self, db: AsyncSession):
        super().__init__(
            repository=UserRoleRepository(db),
            mapper=PydanticEntityMapper(UserRole, UserRoleDTO),
            query_builder=CriteriaQueryBuilder(UserRole),
            validator=ModelValidator(UserRole),
            resource_name="UserRole",
        )

    def normalize_entity(self, entity: UserRole) -> None:
        """
        Strip the role name; a name that is only whitespace is rejected.

        Runs for create, patch and put, so the length rule and the stored
        value both see the stripped name.
        """
        if entity.name is None:
            return

        entity.name = entity.name.strip()
        if not entity.name:
            logger.info("service.normalize.blank_name", extra={"resource": self.resource_name})
            raise InvalidArgumentError(f"{self.resource_name} name must not be blank", fields=["name"])
