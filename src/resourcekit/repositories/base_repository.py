"""
Base repository providing the persistence contract used by `CrudService`.

This class serves as the SQLAlchemy (async) implementation of
`resourcekit.services.contracts.Repository`: lookups by identity or predicate,
upsert-style `save`, hard delete, paginated queries, and the unit of work
(`transaction()`) every service operation runs in.

Model-specific repositories can inherit from this class to add their own
queries; the generic service only relies on the methods defined here.
"""
from resourcekit.exceptions.base import InvalidArgumentError, InvalidFieldError
from resourcekit.exceptions.mapper import db_error_handler
from resourcekit.services.pagination import Page, PageRequest
from resourcekit.validators.model_validator import column_attributes

import time
from typing import TypeVar, Generic, Type, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction
from sqlalchemy import select, delete, func, true
from sqlalchemy.exc import MultipleResultsFound
import logging

from resourcekit.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for entities that mix in `AuditedEntity`.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.

    Notes:
        - Nothing here commits. Writes are flushed so generated values (id,
          created_at) are visible; the unit of work returned by `transaction()`
          decides when they become permanent.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (e.g. UserRole, not UserRole())
            db: The async database session, shared by every call of one request
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Unit of work
    # =================================================================================================================

    def transaction(self) -> AsyncSessionTransaction:
        """
        Return the async context manager one service operation runs in.

        - No transaction in progress: a real transaction (`session.begin()`),
          committed when the block exits cleanly, rolled back otherwise.
        - A transaction already in progress (the caller manages it): a SAVEPOINT
          (`session.begin_nested()`), so a failing operation only discards its
          own writes and the caller's transaction stays usable.
        """
        if self.db.in_transaction():
            return self.db.begin_nested()
        return self.db.begin()

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def find_by_id(self, entity_id: UUID) -> ModelType | None:
        """
        Get an entity by its ID.

        Returns:
            The entity if found, otherwise None
        """
        # SELECT ... WHERE id = :entity_id
        # Always hits the database (unlike session.get, which may answer from the
        # identity map), which is what the post-create verification relies on.
        result = await self.db.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        entity = result.scalar_one_or_none()

        logger.debug(f"Retrieved {self.model.__name__} by ID: {entity_id} (found={entity is not None})")
        return entity

    async def exists_by_id(self, entity_id: UUID) -> bool:
        """
        Check if an entity exists by its ID.

        Only the id column is selected, which is cheaper than loading the row.
        """
        result = await self.db.execute(
            select(self.model.id).where(self.model.id == entity_id)
        )
        exists = result.scalar() is not None

        logger.debug(f"{self.model.__name__} with ID {entity_id} exists: {exists}")
        return exists

    async def find_one(self, predicate: Any) -> ModelType | None:
        """
        Find the single entity matching `predicate`.

        Returns:
            The entity, or None when nothing matches

        Raises:
            InvalidArgumentError: If the predicate matches more than one row
        """
        result = await self.db.execute(select(self.model).where(predicate))
        try:
            return result.scalar_one_or_none()
        except MultipleResultsFound as e:
            logger.info(
                "repo.find_one.multiple_results",
                extra={"model": self.model.__name__, "operation": "find_one"},
            )
            raise InvalidArgumentError(
                f"Criteria matched more than one {self.model.__name__}"
            ) from e

    async def find_all(self, predicate: Any, page_request: PageRequest) -> Page[ModelType]:
        """
        Run a paginated query.

        Args:
            predicate: SQLAlchemy boolean expression (None means "no filter")
            page_request: page index, page size and optional sort

        Returns:
            A Page holding the current slice plus total/page/size

        Raises:
            InvalidFieldError: If the sort property is not a column of the model
        """
        start = time.perf_counter()
        where = predicate if predicate is not None else true()

        total = (
            await self.db.execute(select(func.count()).select_from(self.model).where(where))
        ).scalar_one()

        query = select(self.model).where(where)

        # -------------------
        # ORDERING
        # -------------------
        if page_request.sort is not None:
            sort = page_request.sort
            # Attribute keys, the same names the criteria builder accepts.
            if sort.property not in column_attributes(self.model):
                logger.info(
                    "repo.find_all.invalid_sort",
                    extra={"model": self.model.__name__, "sort_by": sort.property},
                )
                raise InvalidFieldError(
                    f"Cannot sort {self.model.__name__} by unknown field '{sort.property}'",
                    fields=[sort.property],
                )
            attribute = getattr(self.model, sort.property)
            # id breaks ties so equal sort values keep a stable page boundary.
            query = query.order_by(attribute.asc() if sort.ascending else attribute.desc(), self.model.id)
        elif hasattr(self.model, "created_at"):
            # Unsorted requests still need a deterministic order for paging: newest first.
            query = query.order_by(self.model.created_at.desc(), self.model.id)

        # -------------------
        # PAGINATION
        # -------------------
        query = query.offset(page_request.offset).limit(page_request.size)

        entities = list((await self.db.execute(query)).scalars().all())

        logger.debug(
            "repo.find_all.success",
            extra={
                "model": self.model.__name__,
                "operation": "find_all",
                "page": page_request.page,
                "size": page_request.size,
                "returned": len(entities),
                "total": total,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return Page(items=entities, total=total, page=page_request.page, size=page_request.size)

    # =================================================================================================================
    # Write Operations
    # =================================================================================================================

    async def save(self, entity: ModelType) -> ModelType:
        """
        Insert a new entity or write an incoming one over its stored row.

        - `entity.id is None`: INSERT. The id and created_at are assigned during flush.
        - `entity.id` set: `session.merge()` copies the incoming state onto the
          persistent instance with that id (an UPDATE; updated_at is stamped).

        Returns:
            The persistent instance, refreshed from the database

        Raises:
            DuplicateError: If the write violates a unique constraint
            RepositoryError: For other database errors
        """
        is_new = getattr(entity, "id", None) is None
        logger.debug(
            "repo.save.start",
            extra={"model": self.model.__name__, "operation": "insert" if is_new else "update"},
        )

        start = time.perf_counter()
        async with db_error_handler(self.model.__name__):
            if is_new:
                self.db.add(entity)
                persisted = entity
            else:
                persisted = await self.db.merge(entity)

            # flush: send the INSERT/UPDATE so generated values exist, without committing
            await self.db.flush()
            # refresh: reload the row so the returned object mirrors the database
            await self.db.refresh(persisted)

        logger.info(
            "repo.save.success",
            extra={
                "model": self.model.__name__,
                "operation": "insert" if is_new else "update",
                "id": str(persisted.id),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return persisted

    async def delete_by_id(self, entity_id: UUID) -> None:
        """
        Hard-delete the row with the given ID.

        Deleting a missing row is not an error at this level; the service
        checks existence before and after.
        """
        async with db_error_handler(self.model.__name__):
            result = await self.db.execute(
                delete(self.model).where(self.model.id == entity_id)
            )

        if result.rowcount:
            logger.debug(f"Deleted {self.model.__name__} with ID: {entity_id}")
        else:
            logger.warning(f"{self.model.__name__} with ID {entity_id} not found for deletion")
