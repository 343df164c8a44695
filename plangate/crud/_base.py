"""Generic CRUD base.

CRUD objects never commit. The caller that owns the unit of work
(webhook processor, reconciliation job, request handler) decides when
changes become durable.
"""

from typing import Any, Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from plangate.models._base import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """CRUD object with default methods to get and add rows."""

    def __init__(self, model: Type[ModelType]):
        """Bind the CRUD object to a model class."""
        self.model = model

    async def get(self, db: AsyncSession, id: UUID) -> Optional[ModelType]:
        """Get a row by primary key."""
        return await db.get(self.model, id)

    async def create(self, db: AsyncSession, **values: Any) -> ModelType:
        """Insert a new row and flush so generated columns are populated."""
        db_obj = self.model(**values)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def save(self, db: AsyncSession, db_obj: ModelType) -> ModelType:
        """Stage changes to an existing row and flush."""
        db.add(db_obj)
        await db.flush()
        return db_obj
