"""Application layer DTOs"""

from src.service.commerce.app.dto.follow_up_result import FollowUpRunResult
from src.service.commerce.app.dto.notification_dto import Receipt, Subscriber, TransferConfirmation
from src.service.commerce.app.dto.order_result import (
    OrderDetail,
    OrderResult,
    RefundResult,
    TransferResult,
)
from src.service.commerce.app.dto.payment_dto import (
    ProcessorTransaction,
    ReversalResult,
    SaleResult,
)
from src.service.commerce.app.dto.ticket_view import TicketView

__all__ = [
    'FollowUpRunResult',
    'OrderDetail',
    'OrderResult',
    'ProcessorTransaction',
    'Receipt',
    'RefundResult',
    'ReversalResult',
    'SaleResult',
    'Subscriber',
    'TicketView',
    'TransferConfirmation',
    'TransferResult',
]
