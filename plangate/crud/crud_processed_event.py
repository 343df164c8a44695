"""CRUD operations for ProcessedEvent markers."""

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from plangate.crud._base import CRUDBase
from plangate.models.processed_event import ProcessedEvent


class CRUDProcessedEvent(CRUDBase[ProcessedEvent]):
    """CRUD operations for ProcessedEvent model."""

    async def try_claim(self, db: AsyncSession, *, event_id: str, consumer_name: str) -> bool:
        """Insert the marker unless one exists. Returns True when this call inserted it.

        The unique index on (event_id, consumer_name) serializes concurrent
        deliveries: exactly one transaction gets the row back.
        """
        stmt = (
            insert(self.model)
            .values(event_id=event_id, consumer_name=consumer_name)
            .on_conflict_do_nothing(index_elements=["event_id", "consumer_name"])
            .returning(self.model.id)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def purge_older_than(self, db: AsyncSession, *, cutoff: datetime) -> int:
        """Delete markers processed before *cutoff*. Returns rows removed."""
        result = await db.execute(delete(self.model).where(self.model.processed_at < cutoff))
        return result.rowcount or 0


processed_event = CRUDProcessedEvent(ProcessedEvent)
