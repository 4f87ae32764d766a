"""
Base repository class providing the record store operations.

This class is the reusable foundation for repositories that talk to the
database through SQLAlchemy's async session. It offers the small set of
operations the services rely on:

    get_by_id     -> entity | None
    get_all       -> list of entities, in the order the database returns them
    save          -> insert when the entity has no id, update (merge) otherwise
    exists        -> bool
    delete_by_id  -> number of rows removed

Repositories never commit. They flush so generated ids are available, and the
request-scoped session (see `database.session.get_async_session`) commits once
the request succeeds.

Failures coming from SQLAlchemy are converted into `RepositoryError` by
`db_error_handler`; absence is always reported through the return value.
"""

import time
import logging
from typing import Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.base import Base
from ..exceptions.mapper import db_error_handler

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over one model with a primary key column named `id`.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), used to build queries.
            db: The async session injected per request.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Read operations
    # =================================================================================================================

    async def get_by_id(self, entity_id: UUID) -> ModelType | None:
        """
        Get an entity by its ID.

        Returns:
            The entity if found, otherwise None.

        Raises:
            RepositoryError: If the query fails.
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            # 0 or 1 rows: querying by primary key
            entity = result.scalar_one_or_none()

        logger.debug(
            "repo.get_by_id",
            extra={"model": self.model.__name__, "id": str(entity_id), "found": entity is not None},
        )
        return entity

    async def get_all(self) -> list[ModelType]:
        """
        Get every entity. No ORDER BY is applied: rows come back in the
        database's own order.
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(select(self.model))
            entities = list(result.scalars().all())

        logger.debug(
            "repo.get_all",
            extra={"model": self.model.__name__, "count": len(entities)},
        )
        return entities

    async def exists(self, entity_id: UUID) -> bool:
        """
        Check if an entity exists by its ID.
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(
                select(self.model.id).where(self.model.id == entity_id).limit(1)
            )
            exists = result.scalar() is not None

        logger.debug(
            "repo.exists",
            extra={"model": self.model.__name__, "id": str(entity_id), "exists": exists},
        )
        return exists

    # =================================================================================================================
    # Write operations
    # =================================================================================================================

    async def save(self, entity: ModelType) -> ModelType:
        """
        Persist an entity: INSERT when `entity.id` is None, UPDATE (merge)
        otherwise. The returned instance is refreshed from the database so it
        carries generated values such as the id.

        Raises:
            ConstraintViolationError: If a database constraint rejects the row.
            RepositoryError: For other database errors.
        """
        is_new = getattr(entity, "id", None) is None
        start = time.perf_counter()

        async with db_error_handler(self.db, self.model.__name__):
            if is_new:
                self.db.add(entity)
            else:
                # merge() loads the persistent row by primary key and copies the state over it
                entity = await self.db.merge(entity)
            await self.db.flush()
            await self.db.refresh(entity)

        logger.info(
            "repo.save.success",
            extra={
                "model": self.model.__name__,
                "operation": "insert" if is_new else "update",
                "id": str(entity.id),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return entity

    async def delete_by_id(self, entity_id: UUID) -> int:
        """
        Delete an entity by its ID.

        Returns:
            The number of rows removed (0 when nothing matched).
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(
                delete(self.model).where(self.model.id == entity_id)
            )
            count = result.rowcount or 0

        if count:
            logger.debug("repo.delete.success", extra={"model": self.model.__name__, "id": str(entity_id)})
        else:
            logger.info("repo.delete.not_found", extra={"model": self.model.__name__, "id": str(entity_id)})
        return count
