from enum import StrEnum


class BookingStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    REFUNDED = 'refunded'


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    REFUNDED = 'refunded'


class PaymentMethod(StrEnum):
    CREDIT_CARD = 'credit_card'
    DEBIT_CARD = 'debit_card'
    TELEBIRR = 'telebirr'
    CASH = 'cash'

    @property
    def initial_booking_status(self) -> BookingStatus:
        """Cash is paid at the gate, so the booking waits for an admin to confirm it."""
        if self is PaymentMethod.CASH:
            return BookingStatus.PENDING
        return BookingStatus.CONFIRMED
