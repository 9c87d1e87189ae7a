from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.service.park_ticketing.domain.enum.ticket_category import TicketCategory


class TicketTypeModel(Base):
    __tablename__ = 'ticket_type'
    __table_args__ = (
        CheckConstraint('price >= 0', name='ck_ticket_type_price_non_negative'),
        CheckConstraint('max_quantity_per_booking >= 1', name='ck_ticket_type_max_quantity'),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    unit_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('bookable_unit.id'), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TicketCategory.STANDARD.value
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    max_quantity_per_booking: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
