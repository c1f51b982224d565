"""
Entity <-> pydantic DTO mapping.

`PydanticEntityMapper` is the default `Mapper` collaborator of `CrudService`.

    mapper = PydanticEntityMapper(UserRole, UserRoleDTO)
    entity = mapper.to_entity(UserRoleDTO(name="admin"))    # UserRole(id=None, name="admin", ...)
    dto = mapper.to_dto(entity)                             # UserRoleDTO.model_validate(entity, from_attributes=True)
"""
from typing import Generic, Type, TypeVar

from pydantic import BaseModel

from resourcekit.validators.model_validator import column_attributes

E = TypeVar("E")
D = TypeVar("D", bound=BaseModel)


class PydanticEntityMapper(Generic[E, D]):
    """
    Map between an SQLAlchemy entity and a pydantic DTO.

    Only fields present on both sides travel. Every shared field is set on the
    entity, so a field the caller did not send arrives as None (which is what
    the partial-update merge keys on).
    """

    def __init__(self, entity_cls: Type[E], dto_cls: Type[D]):
        self.entity_cls = entity_cls
        self.dto_cls = dto_cls
        self._shared_fields = tuple(
            name for name in dto_cls.model_fields if name in column_attributes(entity_cls)
        )

    def to_entity(self, dto: D) -> E:
        return self.entity_cls(**{name: getattr(dto, name) for name in self._shared_fields})

    def to_dto(self, entity: E) -> D:
        return self.dto_cls.model_validate(entity, from_attributes=True)
