from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.park_ticketing.app.query.get_booking_tickets_use_case import (
    GetBookingTicketsUseCase,
)
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.base_schema import (
    ApiResponse,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
    ValidateQrRequest,
)


router = APIRouter()


@router.get('/code/{ticket_code}')
@Logger.io
async def get_ticket_by_code(
    ticket_code: str,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetBookingTicketsUseCase = Depends(GetBookingTicketsUseCase.depends),
) -> ApiResponse[TicketResponse]:
    ticket = await use_case.get_ticket_by_code(ticket_code=ticket_code, requester=current_user)
    return ApiResponse(data=TicketResponse.model_validate(ticket))


@router.post('/validate-qr')
@Logger.io
async def validate_qr(
    request: ValidateQrRequest,
    _admin: UserEntity = Depends(require_admin),
    use_case: ValidateTicketUseCase = Depends(ValidateTicketUseCase.depends),
) -> ApiResponse[TicketResponse]:
    ticket = await use_case.validate_qr_payload(qr_payload=request.qr_payload)
    return ApiResponse(data=TicketResponse.model_validate(ticket))


@router.post('/validate/{ticket_code}')
@Logger.io
async def validate_ticket(
    ticket_code: str,
    _admin: UserEntity = Depends(require_admin),
    use_case: ValidateTicketUseCase = Depends(ValidateTicketUseCase.depends),
) -> ApiResponse[TicketResponse]:
    ticket = await use_case.validate_ticket(ticket_code=ticket_code)
    return ApiResponse(data=TicketResponse.model_validate(ticket))
