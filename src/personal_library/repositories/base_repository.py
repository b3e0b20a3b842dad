"""
Base repository class providing common database operations.

Model-specific repositories inherit from this class and add their own queries.
Repositories only `flush()`; committing the unit of work is the service's job,
so several repository calls can succeed or fail together.
"""
from personal_library.exceptions.base import PersistenceConflictError
from personal_library.exceptions.integrity_classifier import ConstraintKind
from personal_library.exceptions.mapper import db_error_handler
from personal_library.validators.model_validators import get_required_columns, find_unique_conflicts

import time
from typing import TypeVar, Generic, Type, Any
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
import logging

from personal_library.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), used to build queries.
            db: The async session shared with the other repositories of the request.
        """
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    def _log_extra(self, operation: str, **fields: Any) -> dict:
        return {"model": self.model_name, "operation": operation, **fields}

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, **kwargs) -> ModelType:
        """
        Insert one row and flush it.

        Missing required columns and unique clashes visible before the write are
        reported as PersistenceConflictError without touching the database; a
        clash that only shows up at flush time (concurrent writer) is mapped by
        db_error_handler to the same exception.
        """
        logger.debug("repo.create.start", extra=self._log_extra("create", provided_keys=sorted(kwargs)))

        missing = sorted(c for c in get_required_columns(self.model) if kwargs.get(c) is None)
        if missing:
            logger.info("repo.create.missing_required", extra=self._log_extra("create", missing_fields=missing))
            raise PersistenceConflictError(
                f"Missing required field(s): {', '.join(missing)} for {self.model_name}",
                kind=ConstraintKind.NOT_NULL.value,
                fields=missing,
            )

        conflicts = sorted(await find_unique_conflicts(self.db, self.model, kwargs))
        if conflicts:
            logger.info("repo.create.duplicate_precheck", extra=self._log_extra("create", conflict_fields=conflicts))
            raise PersistenceConflictError(
                f"{self.model_name} already exists for field(s): {', '.join(conflicts)}",
                kind=ConstraintKind.UNIQUE.value,
                fields=conflicts,
            )

        start = time.perf_counter()
        async with db_error_handler(self.db, self.model_name):
            entity = self.model(**kwargs)
            self.db.add(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.create.success",
            extra=self._log_extra(
                "create",
                id=str(entity.id),
                duration_ms=int((time.perf_counter() - start) * 1000),
            ),
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, entity_id: UUID) -> ModelType | None:
        result = await self.db.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        entity = result.scalar_one_or_none()
        logger.debug(f"Retrieved {self.model_name} by ID: {entity_id}")
        return entity

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        """
        Find a single entity by any mapped field.

        Raises:
            AttributeError: If the field does not exist on the model.
        """
        if not hasattr(self.model, field):
            raise AttributeError(f"{self.model_name} has no field '{field}'")

        result = await self.db.execute(
            select(self.model).where(getattr(self.model, field) == value)
        )
        entity = result.scalar_one_or_none()
        logger.debug(f"Found {self.model_name} by {field}: {value}")
        return entity

    async def exists(self, entity_id: UUID) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(self.model.id == entity_id)
        )
        return result.scalar() is not None

    async def count(self, **filters: Any) -> int:
        """
        Count entities with optional equality filters (e.g. is_returned=False).
        Unknown fields are skipped.
        """
        query = select(func.count(self.model.id))
        for field, value in filters.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        result = await self.db.execute(query)
        return result.scalar() or 0

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def update(self, entity_id: UUID, **kwargs) -> ModelType | None:
        """
        Replace the given fields of an entity. `None` values are written as NULL.

        Returns:
            The updated entity, or None when no row has this ID.
        """
        if not kwargs:
            logger.warning(f"No data provided for updating {self.model_name}")
            return await self.get_by_id(entity_id)

        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values(**kwargs)
            .execution_options(synchronize_session="fetch")
        )

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(stmt)

        if result.rowcount == 0:
            logger.info(
                "repo.update.not_found",
                extra=self._log_extra("update", id=str(entity_id)),
            )
            return None

        logger.debug(f"Updated {self.model_name} with ID: {entity_id}")
        return await self.get_by_id(entity_id)

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: UUID) -> bool:
        """
        Delete an entity by its ID. Dependent rows go with it through ON DELETE CASCADE.

        Returns:
            True if entity was deleted, False if not found
        """
        stmt = delete(self.model).where(self.model.id == entity_id)

        async with db_error_handler(self.db, self.model_name):
            result = await self.db.execute(stmt)

        if result.rowcount > 0:
            logger.debug(f"Deleted {self.model_name} with ID: {entity_id}")
            return True

        logger.info(
            "repo.delete.not_found",
            extra=self._log_extra("delete", id=str(entity_id)),
        )
        return False
