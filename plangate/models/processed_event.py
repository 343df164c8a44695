"""Markers for external events that have already been applied."""

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from plangate.models._base import Base


class ProcessedEvent(Base):
    """At most one row per (event_id, consumer_name)."""

    __tablename__ = "processed_events"

    event_id: Mapped[str] = mapped_column(String, nullable=False)
    consumer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("event_id", "consumer_name", name="uq_processed_events_event_consumer"),
    )
