from typing import Any, Optional


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    code: str = 'UNKNOWN'

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        *,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = context or {}
        super().__init__(message)


class InvalidError(CustomBaseError):
    code = 'INVALID'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 400, context=context)


class ItemsUnavailableError(InvalidError):
    """Cart references products that stopped being sellable since the page was loaded."""

    code = 'GONE'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, context=context)
        self.status_code = 410


class UnauthorizedError(CustomBaseError):
    code = 'UNAUTHORIZED'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class PaymentDeclinedError(CustomBaseError):
    code = 'PAYMENT_DECLINED'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 402, context=context)


class NotPermittedError(CustomBaseError):
    code = 'NOT_PERMITTED'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 403, context=context)


class NotFoundError(CustomBaseError):
    code = 'NOT_FOUND'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 404, context=context)


class RefundNotAllowedError(CustomBaseError):
    code = 'REFUND_NOT_ALLOWED'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 409, context=context)


class PaymentProcessorError(CustomBaseError):
    code = 'PROCESSOR_ERROR'

    def __init__(self, message: str, *, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, 502, context=context)


# ========== Check-in errors (carry the guest/event snapshot as context) ==========


class TicketNotFoundError(CustomBaseError):
    code = 'TICKET_NOT_FOUND'

    def __init__(self, message: str = 'Ticket not found for guest') -> None:
        super().__init__(message, 404)


class GuestAlreadyCheckedInError(CustomBaseError):
    code = 'GUEST_ALREADY_CHECKED_IN'

    def __init__(self, context: dict[str, Any], message: str = 'Guest already checked in') -> None:
        super().__init__(message, 409, context=context)


class EventNotActiveError(CustomBaseError):
    code = 'EVENT_NOT_ACTIVE'

    def __init__(self, context: dict[str, Any], message: str = 'Event no longer active') -> None:
        super().__init__(message, 410, context=context)


class EventNotStartedError(CustomBaseError):
    code = 'EVENT_NOT_STARTED'

    def __init__(self, context: dict[str, Any], message: str = 'Event has not started yet') -> None:
        super().__init__(message, 412, context=context)


class GuestNotActiveError(CustomBaseError):
    code = 'GUEST_NOT_ACTIVE'

    def __init__(self, context: dict[str, Any], message: str = 'Guest no longer active') -> None:
        super().__init__(message, 423, context=context)
