from src.service.park_ticketing.driven_adapter.model.bookable_unit_model import BookableUnitModel
from src.service.park_ticketing.driven_adapter.model.booking_model import (
    BookingItemModel,
    BookingModel,
    PaymentModel,
)
from src.service.park_ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.park_ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel


__all__ = [
    'BookableUnitModel',
    'BookingItemModel',
    'BookingModel',
    'PaymentModel',
    'TicketModel',
    'TicketTypeModel',
]
