"""
Collaborator contracts consumed by `CrudService`.

The service is generic over an entity type `E` and a DTO type `D`, and is
composed from four collaborators:

| Contract       | Responsibility                                   | Default implementation                          |
| -------------- | ------------------------------------------------ | ----------------------------------------------- |
| `Repository`   | persistence + unit of work                       | `repositories.base_repository.BaseRepository`   |
| `QueryBuilder` | criteria map -> backend predicate                | `query.criteria.CriteriaQueryBuilder`           |
| `Mapper`       | entity <-> DTO                                   | `mappers.pydantic_mapper.PydanticEntityMapper`  |
| `Validator`    | entity -> list of violation messages             | `validators.model_validator.ModelValidator`     |

These are structural (`typing.Protocol`): any object with matching methods
works, no inheritance needed. Test doubles rely on that.
"""
from __future__ import annotations

from typing import Any, AsyncContextManager, Mapping, Protocol, TypeVar
from uuid import UUID

from .pagination import Page, PageRequest

E = TypeVar("E")
D = TypeVar("D")


class Repository(Protocol[E]):
    """Persistence for one entity type."""

    async def find_by_id(self, entity_id: UUID) -> E | None:
        ...

    async def exists_by_id(self, entity_id: UUID) -> bool:
        ...

    async def save(self, entity: E) -> E:
        ...

    async def delete_by_id(self, entity_id: UUID) -> None:
        ...

    async def find_one(self, predicate: Any) -> E | None:
        ...

    async def find_all(self, predicate: Any, page_request: PageRequest) -> Page[E]:
        ...

    def transaction(self) -> AsyncContextManager[Any]:
        """Open the unit of work one service operation runs in."""
        ...


class QueryBuilder(Protocol):
    def build_predicate(self, criteria: Mapping[str, str]) -> Any:
        ...


class Mapper(Protocol[E, D]):
    def to_entity(self, dto: D) -> E:
        ...

    def to_dto(self, entity: E) -> D:
        ...


class Validator(Protocol[E]):
    def validate(self, entity: E) -> list[str]:
        """Return violation messages; an empty list means valid."""
        ...
