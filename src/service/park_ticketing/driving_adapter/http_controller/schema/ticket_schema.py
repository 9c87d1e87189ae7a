from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from src.service.park_ticketing.driving_adapter.http_controller.schema.base_schema import (
    CamelModel,
)


class TicketResponse(CamelModel):
    id: UUID
    booking_id: UUID
    booking_item_id: UUID
    ticket_code: str
    qr_payload: str
    is_used: bool
    used_at: Optional[datetime] = None
    issued_at: Optional[datetime] = None


class ValidateQrRequest(CamelModel):
    model_config = CamelModel.model_config | {
        'json_schema_extra': {'example': {'qrPayload': 'eyJjb2RlIjoi...In0=.9f86d081884c7d65...'}}
    }

    qr_payload: str = Field(min_length=1, max_length=4096)
