from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status
from opentelemetry import trace

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.command.create_order_use_case import CreateOrderUseCase
from src.service.commerce.app.command.process_follow_up_tasks_use_case import (
    ProcessFollowUpTasksUseCase,
)
from src.service.commerce.app.command.refund_order_use_case import RefundOrderUseCase
from src.service.commerce.app.command.send_order_notifications_use_case import (
    SendOrderNotificationsUseCase,
)
from src.service.commerce.app.command.send_transfer_notifications_use_case import (
    SendTransferNotificationsUseCase,
)
from src.service.commerce.app.command.transfer_tickets_use_case import TransferTicketsUseCase
from src.service.commerce.app.query.create_order_token_use_case import CreateOrderTokenUseCase
from src.service.commerce.app.query.get_order_tickets_use_case import GetOrderTicketsUseCase
from src.service.commerce.app.query.get_order_use_case import GetOrderUseCase
from src.service.commerce.app.query.list_orders_use_case import ListOrdersUseCase
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.value_object.cart import CartLine
from src.service.commerce.domain.value_object.customer_info import CustomerInfo
from src.service.commerce.driving_adapter.http_controller._response import (
    order_response,
    ticket_response,
    transaction_response,
)
from src.service.commerce.driving_adapter.http_controller.auth.operator_auth import (
    Operator,
    require_admin,
)
from src.service.commerce.driving_adapter.http_controller.schema.order_schema import (
    CustomerRequest,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDetailResponse,
    OrderResponse,
    OrderTokenResponse,
    TransferRequest,
    TransferResponse,
)
from src.service.commerce.driving_adapter.http_controller.schema.ticket_schema import (
    TicketResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _customer_info(request: Optional[CustomerRequest]) -> Optional[CustomerInfo]:
    if request is None:
        return None
    return CustomerInfo(
        first_name=request.first_name or '',
        last_name=request.last_name or '',
        email=request.email or '',
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_order(
    request: OrderCreateRequest,
    background_tasks: BackgroundTasks,
    use_case: CreateOrderUseCase = Depends(CreateOrderUseCase.depends),
    follow_up_use_case: ProcessFollowUpTasksUseCase = Depends(
        ProcessFollowUpTasksUseCase.depends
    ),
    notify_use_case: SendOrderNotificationsUseCase = Depends(
        SendOrderNotificationsUseCase.depends
    ),
) -> OrderCreateResponse:
    with tracer.start_as_current_span('controller.create_order') as span:
        span.set_attribute('cart.lines', len(request.cart))

        result = await use_case.execute(
            payment_credential=request.payment_credential or '',
            cart=[CartLine(product_id=line.product_id, quantity=line.quantity) for line in request.cart],
            customer=_customer_info(request.customer),
            promo_id=request.promo_id,
        )
        span.set_attribute('order.id', str(result.order.id))

        order_token = container.order_token_service().create(order_id=result.order.id)

        # Guests and roll-over after the response; the outbox keeps them retryable
        if result.persisted:
            background_tasks.add_task(follow_up_use_case.execute, order_id=result.order.id)
        background_tasks.add_task(
            notify_use_case.execute,
            result=result,
            order_token=order_token,
            marketing_opt_in=request.marketing_opt_in,
        )

        return OrderCreateResponse(
            confirmation_id=result.transaction.processor_transaction_id,
            order_id=result.order.id,
            token=order_token,
        )


@router.get('', response_model=List[OrderResponse])
@Logger.io
async def list_orders(
    customer_id: Optional[UUID] = None,
    order_status: Optional[OrderStatus] = None,
    limit: int = 100,
    operator: Operator = Depends(require_admin),
    use_case: ListOrdersUseCase = Depends(ListOrdersUseCase.depends),
) -> List[OrderResponse]:
    orders = await use_case.list_orders(
        customer_id=customer_id, status=order_status, limit=min(max(limit, 1), 500)
    )
    return [order_response(order) for order in orders]


@router.get('/{order_id}')
@Logger.io
async def get_order(
    order_id: UUID,
    operator: Operator = Depends(require_admin),
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> OrderDetailResponse:
    detail = await use_case.get_order(order_id=order_id)
    return OrderDetailResponse(
        **order_response(detail.order).model_dump(),
        transactions=[transaction_response(t) for t in detail.transactions],
    )


@router.delete('/{order_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def refund_order(
    order_id: UUID,
    operator: Operator = Depends(require_admin),
    use_case: RefundOrderUseCase = Depends(RefundOrderUseCase.depends),
) -> None:
    with tracer.start_as_current_span('controller.refund_order') as span:
        span.set_attribute('order.id', str(order_id))
        await use_case.execute(order_id=order_id, updated_by=operator.id)


@router.post('/{order_id}/transfers', status_code=status.HTTP_201_CREATED)
@Logger.io
async def transfer_tickets(
    order_id: UUID,
    request: TransferRequest,
    background_tasks: BackgroundTasks,
    operator: Operator = Depends(require_admin),
    use_case: TransferTicketsUseCase = Depends(TransferTicketsUseCase.depends),
    notify_use_case: SendTransferNotificationsUseCase = Depends(
        SendTransferNotificationsUseCase.depends
    ),
) -> TransferResponse:
    with tracer.start_as_current_span('controller.transfer_tickets') as span:
        span.set_attribute('order.id', str(order_id))

        result = await use_case.execute(
            order_id=order_id,
            transferee=_customer_info(request.transferee),
            guest_ids=request.guest_ids,
            updated_by=operator.id,
        )

        order_token = container.order_token_service().create(order_id=result.order.id)
        background_tasks.add_task(notify_use_case.execute, result=result, order_token=order_token)

        return TransferResponse(
            order_id=result.order.id,
            parent_order_id=result.order.parent_order_id or order_id,
            transferee_email=result.transferee.email,
            guest_count=result.guest_count,
        )


@router.get('/{order_id}/tickets', response_model=List[TicketResponse])
@Logger.io
async def get_order_tickets(
    order_id: UUID,
    operator: Operator = Depends(require_admin),
    use_case: GetOrderTicketsUseCase = Depends(GetOrderTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.execute(order_id=order_id)
    return [ticket_response(ticket) for ticket in tickets]


@router.get('/{order_id}/token')
@Logger.io
async def create_order_token(
    order_id: UUID,
    operator: Operator = Depends(require_admin),
    use_case: CreateOrderTokenUseCase = Depends(CreateOrderTokenUseCase.depends),
) -> OrderTokenResponse:
    return OrderTokenResponse(token=await use_case.execute(order_id=order_id))
