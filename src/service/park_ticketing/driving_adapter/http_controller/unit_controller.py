from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.query.check_availability_use_case import (
    CheckAvailabilityUseCase,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.base_schema import (
    ApiResponse,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.booking_schema import (
    AvailabilityResponse,
)


router = APIRouter()


@router.get('/{unit_id}/availability')
@Logger.io
async def check_availability(
    unit_id: UUID,
    quantity: int = Query(1, ge=1),
    use_case: CheckAvailabilityUseCase = Depends(CheckAvailabilityUseCase.depends),
) -> ApiResponse[AvailabilityResponse]:
    availability = await use_case.check_availability(unit_id=unit_id, quantity=quantity)
    return ApiResponse(
        data=AvailabilityResponse(
            unit_id=unit_id,
            quantity=quantity,
            available=availability.available,
            remaining=availability.remaining,
        )
    )
