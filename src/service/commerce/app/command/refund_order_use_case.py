from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import NotFoundError, PaymentProcessorError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.commerce_metrics import metrics
from src.service.commerce.app.dto.order_result import RefundResult
from src.service.commerce.app.interface.i_payment_gateway import IPaymentGateway
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import TransactionType
from src.service.commerce.domain.payment_domain import choose_reversal


class RefundOrderUseCase:
    """
    Cancel a paid order: reverse the charge at the processor, then cancel locally.

    Settled (or settling) charges are refunded, anything else is voided. Exactly
    one of the two is attempted and a failure is never retried the other way.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, payment_gateway: IPaymentGateway) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(get_unit_of_work),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway)

    @Logger.io
    async def execute(self, *, order_id: UUID, updated_by: Optional[str] = None) -> RefundResult:
        with self.tracer.start_as_current_span(
            'use_case.refund_order', attributes={'order.id': str(order_id)}
        ):
            async with self.uow:
                order = await self.uow.order_command_repo.get_by_id(order_id=order_id)
                if order is None:
                    raise NotFoundError('Order not found', context={'order_id': str(order_id)})
                sale = await self.uow.order_command_repo.get_sale_transaction(order_id=order_id)
                if sale is None:
                    raise NotFoundError(
                        'Transaction not found', context={'order_id': str(order_id)}
                    )
                order.ensure_refundable()

            processor_transaction = await self.payment_gateway.find(
                transaction_id=sale.processor_transaction_id
            )
            reversal_type = choose_reversal(processor_transaction.status)
            Logger.base.info(
                f'💸 [REFUND] Order {order_id}: processor status '
                f'{processor_transaction.status.value} → {reversal_type.value}'
            )

            if reversal_type == TransactionType.REFUND:
                reversal = await self.payment_gateway.refund(
                    transaction_id=sale.processor_transaction_id, amount=sale.amount
                )
            else:
                reversal = await self.payment_gateway.void(
                    transaction_id=sale.processor_transaction_id
                )

            metrics.record_reversal(type=reversal_type.value, success=reversal.success)
            if not reversal.success or not reversal.transaction_id:
                raise PaymentProcessorError(
                    f'Could not {reversal_type.value} order: {reversal.message}',
                    context={'order_id': str(order_id), 'type': reversal_type.value},
                )

            reversal_transaction = sale.reversal(
                type=reversal_type,
                processor_transaction_id=reversal.transaction_id,
                processor_created_at=reversal.created_at,
            )
            canceled_order = order.cancel()

            try:
                async with self.uow:
                    await self.uow.order_command_repo.add_transaction(
                        transaction=reversal_transaction
                    )
                    stored_order = await self.uow.order_command_repo.update_status(
                        order_id=order_id, status=OrderStatus.CANCELED
                    )
                    archived = await self.uow.guest_command_repo.archive_active_by_order(
                        order_id=order_id, updated_by=updated_by
                    )
                    await self.uow.commit()
                canceled_order = stored_order or canceled_order
                Logger.base.info(
                    f'✅ [REFUND] Order {order_id} canceled, {archived} guests archived'
                )
            except Exception as e:
                # Money already moved back: never surface this as a failed refund
                Logger.base.critical(
                    f'🚨 [RECONCILE] {reversal_type.value} {reversal.transaction_id} succeeded '
                    f'but order {order_id} was not updated: {e}'
                )

            return RefundResult(order=canceled_order, transaction=reversal_transaction)
