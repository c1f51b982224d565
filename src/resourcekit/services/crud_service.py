"""
Generic CRUD service.

`CrudService[E, D]` orchestrates the lifecycle of one resource type:

    DTO -> mapper -> normalisation -> validation -> pre-processing -> repository -> post-processing -> mapper -> DTO

It is composed from the four collaborators described in
`resourcekit.services.contracts` and never touches the database directly.
Every public operation runs inside one unit of work
(`repository.transaction()`), so a failure after validation leaves no partial
write behind.

Behaviour is customised per resource by overriding the hook methods
(`process_before_create`, `process_after_patch`, ...) or the validation steps
(`apply_pre_persist_validation`, `apply_initial_check_before_patch`, ...).

Usage:
    service = CrudService(
        repository=UserRoleRepository(session),
        mapper=PydanticEntityMapper(UserRole, UserRoleDTO),
        query_builder=CriteriaQueryBuilder(UserRole),
        validator=ModelValidator(UserRole),
        resource_name="UserRole",
    )
    role = await service.create(UserRoleDTO(name="admin"))
"""
from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, TypeVar
from uuid import UUID

from resourcekit.exceptions.base import (
    InvalidArgumentError,
    NotFoundError,
    ResourceCreationFailedError,
)
from .contracts import Mapper, QueryBuilder, Repository, Validator
from .merge import merge_fields_of, merge_source_to_target
from .pagination import Page, PageRequest, parse_page_request

E = TypeVar("E")
D = TypeVar("D")

logger = logging.getLogger(__name__)

# Audit fields a caller may not supply on create; identity is checked separately.
CREATE_FORBIDDEN_TIMESTAMPS = ("created_at", "updated_at", "deleted_at")


class CrudService(Generic[E, D]):
    """
    Generic find / create / patch / put / delete / find_all orchestration.

    Type Parameters:
        E: entity type handled by the repository (mixes in `AuditedEntity`)
        D: DTO type exposed to callers
    """

    def __init__(
        self,
        repository: Repository[E],
        mapper: Mapper[E, D],
        query_builder: QueryBuilder,
        validator: Validator[E],
        resource_name: str | None = None,
    ):
        self.repository = repository
        self.mapper = mapper
        self.query_builder = query_builder
        self.validator = validator
        self.resource_name = resource_name or "Resource"

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def find(self, entity_id: UUID) -> D:
        """
        Find one resource by its ID.

        Raises:
            NotFoundError: If no row has this ID
        """
        async with self.repository.transaction():
            entity = await self._get_or_raise(entity_id)
            return self.mapper.to_dto(entity)

    async def find_by(self, criteria: Mapping[str, str]) -> D:
        """
        Find one resource using criteria other than its ID.

        Raises:
            NotFoundError: If nothing matches
            InvalidArgumentError: If the criteria are malformed or match several rows
        """
        predicate = self.query_builder.build_predicate(criteria)

        async with self.repository.transaction():
            entity = await self.repository.find_one(predicate)
            if entity is None:
                logger.info(
                    "service.find_by.not_found",
                    extra={"resource": self.resource_name, "criteria": dict(criteria)},
                )
                raise NotFoundError(f"{self.resource_name} with criteria [{dict(criteria)}] not found")
            return self.mapper.to_dto(entity)

    async def find_all(self, criteria: Mapping[str, str] | None = None) -> Page[D]:
        """
        Find a page of resources.

        Pagination keys (`size`, `page`, `sortBy`, `sortDirection`) shape the
        page request; every other key is a filter.
        """
        criteria = criteria or {}
        page_request = self.process_before_find_all(criteria)
        predicate = self.query_builder.build_predicate(criteria)

        async with self.repository.transaction():
            page = await self.repository.find_all(predicate, page_request)

            logger.debug(
                "service.find_all.success",
                extra={"resource": self.resource_name, "total": page.total, "page": page.page, "size": page.size},
            )
            # Map before the commit: it may expire the loaded rows.
            return page.map(self.mapper.to_dto)

    # =================================================================================================================
    # Write Operations
    # =================================================================================================================

    async def create(self, data: D) -> D:
        """
        Create a new resource.

        Raises:
            InvalidArgumentError: Validation failed, or id / audit timestamps were supplied
            ResourceCreationFailedError: The row was written but could not be read back
            DuplicateError: A unique constraint was violated
        """
        entity = self.mapper.to_entity(data)
        self.normalize_entity(entity)

        async with self.repository.transaction():
            self.apply_pre_persist_validation(entity)
            await self.process_before_create(entity)

            saved = await self.repository.save(entity)

            await self.verify_persisted(saved)
            await self.process_after_create(saved)

            logger.info(
                "service.create.success",
                extra={"resource": self.resource_name, "entity_id": str(saved.id)},
            )
            return self.mapper.to_dto(saved)

    async def patch(self, data: D) -> D:
        """
        Partially update a resource: fields left unset (None) keep their stored value.

        Raises:
            InvalidArgumentError: Missing or unknown id, or deleted_at supplied
        """
        entity = self.mapper.to_entity(data)
        self.normalize_entity(entity)

        async with self.repository.transaction():
            await self.apply_initial_check_before_patch(entity)
            await self.process_before_patch(entity)

            saved = await self.repository.save(entity)

            await self.process_after_patch(saved)

            logger.info(
                "service.patch.success",
                extra={"resource": self.resource_name, "entity_id": str(saved.id)},
            )
            return self.mapper.to_dto(saved)

    async def put(self, data: D) -> D:
        """
        Replace a resource. Fields left unset are cleared; created_at is always kept.

        Raises:
            InvalidArgumentError: Same checks as `patch`, plus validation failures
        """
        entity = self.mapper.to_entity(data)
        self.normalize_entity(entity)

        async with self.repository.transaction():
            await self.apply_initial_check_before_put(entity)
            await self.process_before_put(entity)

            saved = await self.repository.save(entity)

            await self.process_after_put(saved)

            logger.info(
                "service.put.success",
                extra={"resource": self.resource_name, "entity_id": str(saved.id)},
            )
            return self.mapper.to_dto(saved)

    async def delete(self, entity_id: UUID) -> None:
        """
        Hard-delete a resource by its ID.

        Raises:
            InvalidArgumentError: No row has this ID, or the row survived the delete
        """
        async with self.repository.transaction():
            if not await self.repository.exists_by_id(entity_id):
                logger.info(
                    "service.delete.unknown_id",
                    extra={"resource": self.resource_name, "entity_id": str(entity_id)},
                )
                raise InvalidArgumentError(
                    f"The {self.resource_name} you are trying to remove does not exist [{entity_id}]",
                    fields=["id"],
                )

            await self.repository.delete_by_id(entity_id)

            if await self.repository.exists_by_id(entity_id):
                logger.error(
                    "service.delete.not_removed",
                    extra={"resource": self.resource_name, "entity_id": str(entity_id)},
                )
                raise InvalidArgumentError(
                    f"An error occurred during delete operation - {self.resource_name} [{entity_id}] not deleted"
                )

        logger.info("service.delete.success", extra={"resource": self.resource_name, "entity_id": str(entity_id)})

    # =================================================================================================================
    # Validation steps
    # =================================================================================================================

    def normalize_entity(self, entity: E) -> None:
        """
        Canonicalise caller input in place, right after mapping and before any check.

        Validation and persistence see the normalised values, so length and
        nullability rules apply to what is actually stored. The default does nothing.

        Raises:
            InvalidArgumentError: When a value has no acceptable normal form
        """

    def apply_pre_persist_validation(self, entity: E) -> None:
        """Reject validator violations, a caller-supplied id and any caller-supplied audit timestamp."""
        self._raise_on_violations(entity)

        if entity.has_id():
            logger.info("service.create.id_supplied", extra={"resource": self.resource_name})
            raise InvalidArgumentError(
                f"Field id not allowed for create operation on {self.resource_name}", fields=["id"]
            )

        for field in CREATE_FORBIDDEN_TIMESTAMPS:
            if getattr(entity, field) is not None:
                logger.info(
                    "service.create.timestamp_supplied",
                    extra={"resource": self.resource_name, "field": field},
                )
                raise InvalidArgumentError(
                    f"Field {field} not allowed for create operation on {self.resource_name}", fields=[field]
                )

    async def apply_initial_check_before_patch(self, entity: E) -> None:
        # The id check must come first: nothing may reach the repository without one.
        if not entity.has_id():
            logger.info("service.update.missing_id", extra={"resource": self.resource_name})
            raise InvalidArgumentError(
                f"The ID is mandatory for update operation on {self.resource_name}", fields=["id"]
            )

        if not await self.repository.exists_by_id(entity.id):
            logger.info(
                "service.update.unknown_id",
                extra={"resource": self.resource_name, "entity_id": str(entity.id)},
            )
            raise InvalidArgumentError(
                f"The ID of the {self.resource_name} to update is not valid [{entity.id}]", fields=["id"]
            )

        if entity.has_deleted_at():
            logger.info(
                "service.update.deleted_at_supplied",
                extra={"resource": self.resource_name, "entity_id": str(entity.id)},
            )
            raise InvalidArgumentError(
                f"Field deleted_at not allowed for update operation on {self.resource_name}",
                fields=["deleted_at"],
            )

    async def apply_initial_check_before_put(self, entity: E) -> None:
        await self.apply_initial_check_before_patch(entity)
        self._raise_on_violations(entity)

    def _raise_on_violations(self, entity: E) -> None:
        violations = list(self.validator.validate(entity))
        if violations:
            logger.info(
                "service.validation.failed",
                extra={"resource": self.resource_name, "violations": violations},
            )
            raise InvalidArgumentError(
                f"{self.resource_name} validation failed with message: {violations}",
                violations=violations,
            )

    # =================================================================================================================
    # Hooks
    # =================================================================================================================

    async def process_before_create(self, entity: E) -> None:
        logger.debug("service.create.before", extra={"resource": self.resource_name})

    async def process_after_create(self, entity: E) -> None:
        logger.debug("service.create.after", extra={"resource": self.resource_name, "entity_id": str(entity.id)})

    async def process_before_patch(self, entity: E) -> None:
        """Fill every field the caller left unset from the stored row."""
        stored = await self.repository.find_by_id(entity.id)
        if stored is not None:
            merge_source_to_target(stored, entity, merge_fields_of(entity))

    async def process_after_patch(self, entity: E) -> None:
        logger.debug("service.patch.after", extra={"resource": self.resource_name, "entity_id": str(entity.id)})

    async def process_before_put(self, entity: E) -> None:
        """Keep the stored creation timestamp; callers cannot rewrite it."""
        stored = await self.repository.find_by_id(entity.id)
        if stored is not None:
            entity.created_at = stored.created_at

    async def process_after_put(self, entity: E) -> None:
        logger.debug("service.put.after", extra={"resource": self.resource_name, "entity_id": str(entity.id)})

    def process_before_find_all(self, criteria: Mapping[str, str]) -> PageRequest:
        return parse_page_request(criteria)

    # =================================================================================================================
    # Helpers
    # =================================================================================================================

    async def verify_persisted(self, entity: E) -> None:
        """
        Read a freshly created entity back by its assigned ID.

        Raises:
            ResourceCreationFailedError: If the read fails for any reason
        """
        try:
            await self._get_or_raise(entity.id)
        except Exception as e:
            logger.error(
                "service.create.verification_failed",
                extra={"resource": self.resource_name, "entity_id": str(getattr(entity, "id", None))},
            )
            raise ResourceCreationFailedError(
                f"{self.resource_name} created but not persisted [{getattr(entity, 'id', None)}]"
            ) from e

        logger.debug(
            "service.create.verified",
            extra={"resource": self.resource_name, "entity_id": str(entity.id)},
        )

    async def _get_or_raise(self, entity_id: Any) -> E:
        entity = await self.repository.find_by_id(entity_id)
        if entity is None:
            logger.info(
                "service.find.not_found",
                extra={"resource": self.resource_name, "entity_id": str(entity_id)},
            )
            raise NotFoundError(f"{self.resource_name} with ID [{entity_id}] not found", fields=["id"])
        return entity
