from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.park_ticketing.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.park_ticketing.app.command.confirm_payment_use_case import (
    ConfirmPaymentUseCase,
)
from src.service.park_ticketing.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.park_ticketing.app.query.get_booking_tickets_use_case import (
    GetBookingTicketsUseCase,
)
from src.service.park_ticketing.app.query.get_booking_use_case import GetBookingUseCase
from src.service.park_ticketing.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.domain.enum.booking_status import BookingStatus
from src.service.park_ticketing.domain.value_object.requested_item import RequestedItem
from src.service.park_ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    get_optional_user,
    require_admin,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.base_schema import (
    ApiResponse,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingPageResponse,
    BookingResponse,
)
from src.service.park_ticketing.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: Optional[UserEntity] = Depends(get_optional_user),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    """Authenticated visitors book for themselves; without a token guest details are required"""
    booking = await use_case.create_booking(
        unit_id=request.unit_id,
        requested_items=[
            RequestedItem(ticket_type_id=item.ticket_type_id, quantity=item.quantity)
            for item in request.items
        ],
        payment_method=request.payment_method,
        requester=current_user,
        guest_email=request.guest_email,
        guest_name=request.guest_name,
        notes=request.notes,
    )
    return ApiResponse(data=BookingResponse.from_entity(booking))


@router.get('/my')
@Logger.io(truncate_content=True)
async def list_my_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> ApiResponse[BookingPageResponse]:
    booking_page = await use_case.list_my_bookings(requester=current_user, page=page, limit=limit)
    return ApiResponse(data=BookingPageResponse.from_page(booking_page))


@router.get('')
@Logger.io(truncate_content=True)
async def list_all_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias='status'),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    _admin: UserEntity = Depends(require_admin),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> ApiResponse[BookingPageResponse]:
    booking_page = await use_case.list_all_bookings(
        status=booking_status, page=page, limit=limit
    )
    return ApiResponse(data=BookingPageResponse.from_page(booking_page))


@router.get('/reference/{reference}')
@Logger.io
async def get_booking_by_reference(
    reference: str,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.get_booking_by_reference(reference=reference, requester=current_user)
    return ApiResponse(data=BookingResponse.from_entity(booking))


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.get_booking(booking_id=booking_id, requester=current_user)
    return ApiResponse(data=BookingResponse.from_entity(booking))


@router.post('/{booking_id}/cancel')
@Logger.io
async def cancel_booking(
    booking_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.cancel_booking(booking_id=booking_id, requester=current_user)
    return ApiResponse(data=BookingResponse.from_entity(booking))


@router.post('/{booking_id}/payment/confirm')
@Logger.io
async def confirm_payment(
    booking_id: UUID,
    _admin: UserEntity = Depends(require_admin),
    use_case: ConfirmPaymentUseCase = Depends(ConfirmPaymentUseCase.depends),
) -> ApiResponse[BookingResponse]:
    booking = await use_case.confirm_payment(booking_id=booking_id)
    return ApiResponse(data=BookingResponse.from_entity(booking))


@router.get('/{booking_id}/tickets')
@Logger.io(truncate_content=True)
async def get_booking_tickets(
    booking_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetBookingTicketsUseCase = Depends(GetBookingTicketsUseCase.depends),
) -> ApiResponse[list[TicketResponse]]:
    tickets = await use_case.get_tickets(booking_id=booking_id, requester=current_user)
    return ApiResponse(data=[TicketResponse.model_validate(ticket) for ticket in tickets])
