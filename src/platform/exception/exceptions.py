from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    kind: str = 'InternalError'

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        self.extra: dict[str, Any] = {}
        super().__init__(message)


class DomainError(CustomBaseError):
    kind = 'InvalidRequest'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    kind = 'Forbidden'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    kind = 'NotFound'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    kind = 'Conflict'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    kind = 'Unauthenticated'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class TransientFailureError(CustomBaseError):
    """Storage contention or timeout. The whole operation may be retried from scratch."""

    kind = 'TransientFailure'

    def __init__(self, message: str = 'Service temporarily unavailable, please retry') -> None:
        super().__init__(message, 503)


class ConfigurationError(CustomBaseError):
    """Fatal misconfiguration detected at startup, never raised per request."""

    kind = 'ConfigurationError'

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


# === Catalog ===


class UnitNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Event or game not found') -> None:
        super().__init__(message)


class TicketTypeNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Ticket type not found') -> None:
        super().__init__(message)


class MismatchedUnitError(DomainError):
    def __init__(self, message: str = 'Ticket type does not belong to this event or game') -> None:
        super().__init__(message)


class QuantityExceedsLimitError(DomainError):
    pass


class CapacityExceededError(CustomBaseError):
    kind = 'CapacityExceeded'

    def __init__(self, remaining: int) -> None:
        super().__init__(f'Not enough tickets available. Only {remaining} remaining.', 400)
        self.remaining = remaining
        self.extra = {'remaining': remaining}


class PastDatedError(CustomBaseError):
    kind = 'PastDated'

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


# === Booking lifecycle ===


class BookingNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Booking not found') -> None:
        super().__init__(message)


class AlreadyCancelledError(CustomBaseError):
    kind = 'AlreadyCancelled'

    def __init__(self, message: str = 'Booking is already cancelled') -> None:
        super().__init__(message, 400)


# === Tickets ===


class TicketNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Ticket not found') -> None:
        super().__init__(message)


class AlreadyUsedError(CustomBaseError):
    kind = 'AlreadyUsed'

    def __init__(self, message: str = 'Ticket has already been used') -> None:
        super().__init__(message, 400)


class InvalidQrPayloadError(DomainError):
    def __init__(self, message: str = 'Invalid QR code') -> None:
        super().__init__(message)
