from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Integer,
    String,
    Text,
    Time,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class BookableUnitModel(Base):
    """Events and games in one table, discriminated by `kind`"""

    __tablename__ = 'bookable_unit'
    __table_args__ = (
        CheckConstraint("kind IN ('event', 'game')", name='ck_bookable_unit_kind'),
        CheckConstraint(
            "kind <> 'event' OR (unit_date IS NOT NULL AND capacity IS NOT NULL)",
            name='ck_bookable_unit_event_schedule',
        ),
        CheckConstraint('tickets_sold >= 0', name='ck_bookable_unit_tickets_sold_non_negative'),
        CheckConstraint(
            'capacity IS NULL OR tickets_sold <= capacity',
            name='ck_bookable_unit_no_oversell',
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    tickets_sold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
