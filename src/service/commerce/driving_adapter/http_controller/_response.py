"""Entity → response schema mapping shared by the controllers"""

from src.service.commerce.app.dto.ticket_view import TicketView
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.driving_adapter.http_controller.schema.guest_schema import GuestResponse
from src.service.commerce.driving_adapter.http_controller.schema.order_schema import (
    OrderItemResponse,
    OrderResponse,
    TransactionResponse,
)
from src.service.commerce.driving_adapter.http_controller.schema.ticket_schema import (
    EventSummaryResponse,
    TicketResponse,
)


def order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        customer_id=order.customer_id,
        amount=order.amount,
        status=order.status,
        promo_id=order.promo_id,
        parent_order_id=order.parent_order_id,
        items=[
            OrderItemResponse(product_id=item.product_id, quantity=item.quantity)
            for item in order.items
        ],
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def transaction_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        processor=transaction.processor,
        processor_transaction_id=transaction.processor_transaction_id,
        type=transaction.type,
        amount=transaction.amount,
        parent_transaction_id=transaction.parent_transaction_id,
        created_at=transaction.created_at,
    )


def guest_response(guest: Guest) -> GuestResponse:
    return GuestResponse(
        id=guest.id,
        first_name=guest.first_name,
        last_name=guest.last_name,
        admission_tier=guest.admission_tier,
        status=guest.status,
        created_reason=guest.created_reason,
        event_id=guest.event_id,
        order_id=guest.order_id,
        check_in_time=guest.check_in_time,
        created_by=guest.created_by,
        updated_by=guest.updated_by,
        meta=guest.meta,
        created_at=guest.created_at,
        updated_at=guest.updated_at,
    )


def ticket_response(ticket: TicketView) -> TicketResponse:
    return TicketResponse(
        guest=guest_response(ticket.guest),
        event=EventSummaryResponse(
            id=ticket.event.id,
            name=ticket.event.name,
            date=ticket.event.date,
            status=ticket.event.status,
        ),
        qr_payload=ticket.qr_payload,
    )
