"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.park_ticketing.app.command import (
    cancel_booking_use_case,
    confirm_payment_use_case,
    create_booking_use_case,
    validate_ticket_use_case,
)
from src.service.park_ticketing.app.query import (
    check_availability_use_case,
    get_booking_tickets_use_case,
    get_booking_use_case,
    list_bookings_use_case,
)
from src.service.park_ticketing.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    cancel_booking_use_case,
    confirm_payment_use_case,
    validate_ticket_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    get_booking_tickets_use_case,
    check_availability_use_case,
    role_auth,
]
