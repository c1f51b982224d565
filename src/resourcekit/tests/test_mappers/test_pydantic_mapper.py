import uuid
from datetime import datetime, timezone

from pydantic import BaseModel

from resourcekit.mappers.pydantic_mapper import PydanticEntityMapper
from resourcekit.models.user_role import UserRole
from resourcekit.schemas.user_role import UserRoleDTO


def test_to_entity_sets_every_shared_field():
    mapper = PydanticEntityMapper(UserRole, UserRoleDTO)

    entity = mapper.to_entity(UserRoleDTO(name="admin"))

    assert isinstance(entity, UserRole)
    assert entity.name == "admin"
    assert entity.description is None
    assert not entity.has_id()
    assert not entity.has_deleted_at()


def test_to_dto_reads_entity_attributes():
    mapper = PydanticEntityMapper(UserRole, UserRoleDTO)
    role_id = uuid.uuid4()
    created_at = datetime(2024, 5, 1, tzinfo=timezone.utc)

    dto = mapper.to_dto(UserRole(id=role_id, name="admin", description="all", created_at=created_at))

    assert dto == UserRoleDTO(id=role_id, name="admin", description="all", created_at=created_at)


def test_dto_only_fields_do_not_reach_the_entity():
    class RoleWithExtras(BaseModel):
        name: str | None = None
        permissions: list[str] = []

    mapper = PydanticEntityMapper(UserRole, RoleWithExtras)

    entity = mapper.to_entity(RoleWithExtras(name="admin", permissions=["read"]))

    assert entity.name == "admin"
    assert not hasattr(entity, "permissions")
