from collections import OrderedDict
from typing import List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import (
    InvalidError,
    NotFoundError,
    PaymentDeclinedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.commerce_metrics import metrics
from src.platform.observability.tracing import inject_trace_context
from src.service.commerce.app.dto.order_result import OrderResult
from src.service.commerce.app.interface.i_payment_gateway import IPaymentGateway
from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.follow_up_task_entity import FollowUpTask
from src.service.commerce.domain.entity.order_entity import Order, OrderItem
from src.service.commerce.domain.entity.promo_entity import Promo
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.catalog_enum import PromoType
from src.service.commerce.domain.enum.payment_enum import FollowUpTaskKind
from src.service.commerce.domain.pricing_domain import PricingEngine
from src.service.commerce.domain.value_object.cart import CartLine, PricedCart
from src.service.commerce.domain.value_object.customer_info import CustomerInfo


class CreateOrderUseCase:
    """
    Place an order: price the cart, charge the card, persist the paid order.

    Flow:
    1. Validate input, price the cart against the catalog
    2. Upsert the customer, claim a single-use promo (committed before the charge)
    3. Charge once; a decline releases the promo claim and persists nothing
    4. Persist order + items + sale transaction + follow-up tasks in one transaction,
       idempotent on the pre-generated order id and retried on failure

    The charge is never retried. If every persist attempt fails the charge is
    logged for reconciliation and the order is still reported as placed.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, payment_gateway: IPaymentGateway) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.persist_attempts = settings.ORDER_PERSIST_ATTEMPTS
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
    async def execute(
        self,
        *,
        payment_credential: str,
        cart: List[CartLine],
        customer: Optional[CustomerInfo],
        promo_id: Optional[UUID] = None,
    ) -> OrderResult:
        if (
            not cart
            or not payment_credential
            or customer is None
            or not customer.first_name
            or not customer.last_name
            or not customer.email
        ):
            raise InvalidError('Invalid payment parameters')

        new_customer = Customer.create(
            first_name=customer.first_name, last_name=customer.last_name, email=customer.email
        )

        with self.tracer.start_as_current_span('use_case.create_order'):
            async with self.uow:
                promo = await self._load_promo(promo_id=promo_id)
                promo_uses = 0
                if promo is not None and promo.type == PromoType.COUPON:
                    promo_uses = await self.uow.catalog_query_repo.count_promo_uses(
                        promo_id=promo.id
                    )

                products = await self.uow.catalog_query_repo.get_products(
                    product_ids=list(OrderedDict.fromkeys(line.product_id for line in cart))
                )
                priced_cart = PricingEngine.price_cart(
                    cart=cart, products=products, promo=promo, promo_uses=promo_uses
                )

                stored_customer = await self.uow.customer_command_repo.upsert_by_email(
                    customer=new_customer
                )

                promo_claimed = False
                if promo is not None and promo.is_single_use:
                    promo_claimed = await self.uow.promo_command_repo.claim_single_use(
                        promo_id=promo.id
                    )
                    if not promo_claimed:
                        Logger.base.warning(
                            f'🎟️ [CREATE-ORDER] Promo {promo.id} already claimed by another order'
                        )
                        raise InvalidError(
                            'Invalid promo code', context={'promo_id': str(promo.id)}
                        )

                await self.uow.commit()

            order_id = uuid7()
            Logger.base.info(
                f'📝 [CREATE-ORDER] Charging {priced_cart.subtotal} for order {order_id} '
                f'(customer {stored_customer.id})'
            )

            metadata = {'customer_id': str(stored_customer.id), 'order_id': str(order_id)}
            if promo is not None:
                metadata['promo_id'] = str(promo.id)

            try:
                sale = await self.payment_gateway.sale(
                    amount=priced_cart.subtotal,
                    payment_credential=payment_credential,
                    metadata=metadata,
                )
            except Exception as e:
                Logger.base.error(f'❌ [CREATE-ORDER] Sale for order {order_id} failed: {e}')
                if promo_claimed and promo is not None:
                    await self._release_promo(promo_id=promo.id)
                raise

            if not sale.success or not sale.transaction_id:
                metrics.record_payment_declined()
                if promo_claimed and promo is not None:
                    await self._release_promo(promo_id=promo.id)
                raise PaymentDeclinedError(
                    f'Order error: "{sale.message}"', context={'order_id': str(order_id)}
                )

            order = Order.create_paid(
                id=order_id,
                customer_id=stored_customer.id,
                amount=priced_cart.subtotal,
                items=self._order_items(order_id=order_id, priced_cart=priced_cart),
                promo_id=promo.id if promo is not None else None,
            )
            transaction = Transaction.sale(
                order_id=order_id,
                processor=self.payment_gateway.processor,
                processor_transaction_id=sale.transaction_id,
                processor_created_at=sale.created_at,
                amount=priced_cart.subtotal,
            )

            persisted = await self._persist(
                order=order,
                transaction=transaction,
                tasks=self._follow_up_tasks(order=order, priced_cart=priced_cart),
            )
            metrics.record_order_created(amount=float(order.amount), persisted=persisted)

            Logger.base.info(
                f'✅ [CREATE-ORDER] Order {order.id} paid ({transaction.processor_transaction_id})'
            )
            return OrderResult(
                order=order, transaction=transaction, customer=stored_customer, persisted=persisted
            )

    async def _load_promo(self, *, promo_id: Optional[UUID]) -> Optional[Promo]:
        if promo_id is None:
            return None
        promo = await self.uow.catalog_query_repo.get_promo(promo_id=promo_id)
        if promo is None:
            raise NotFoundError('Promo not found', context={'promo_id': str(promo_id)})
        return promo

    async def _release_promo(self, *, promo_id: UUID) -> None:
        async with self.uow:
            released = await self.uow.promo_command_repo.release_claim(promo_id=promo_id)
            await self.uow.commit()
        Logger.base.info(f'🎟️ [CREATE-ORDER] Released promo {promo_id} claim: {released}')

    @staticmethod
    def _order_items(*, order_id: UUID, priced_cart: PricedCart) -> List[OrderItem]:
        # The same product on several cart lines becomes one order item
        quantities: OrderedDict[UUID, int] = OrderedDict()
        for line in priced_cart.lines:
            quantities[line.product.id] = quantities.get(line.product.id, 0) + line.quantity
        return [
            OrderItem(order_id=order_id, product_id=product_id, quantity=quantity)
            for product_id, quantity in quantities.items()
        ]

    @staticmethod
    def _follow_up_tasks(*, order: Order, priced_cart: PricedCart) -> List[FollowUpTask]:
        trace_context = inject_trace_context()
        tasks: List[FollowUpTask] = []

        if any(line.product.type.issues_guests for line in priced_cart.lines):
            tasks.append(
                FollowUpTask.create(
                    order_id=order.id,
                    kind=FollowUpTaskKind.CREATE_PURCHASE_GUESTS,
                    payload={'trace_context': trace_context},
                )
            )

        limited_product_ids = list(
            OrderedDict.fromkeys(
                str(line.product.id)
                for line in priced_cart.lines
                if line.product.max_quantity is not None
            )
        )
        if limited_product_ids:
            tasks.append(
                FollowUpTask.create(
                    order_id=order.id,
                    kind=FollowUpTaskKind.ROLL_OVER_INVENTORY,
                    payload={'product_ids': limited_product_ids, 'trace_context': trace_context},
                )
            )
        return tasks

    async def _persist(
        self, *, order: Order, transaction: Transaction, tasks: List[FollowUpTask]
    ) -> bool:
        for attempt in range(1, self.persist_attempts + 1):
            try:
                async with self.uow:
                    inserted = await self.uow.order_command_repo.create_paid_order(
                        order=order, transaction=transaction
                    )
                    if inserted:
                        await self.uow.follow_up_task_repo.add_many(tasks=tasks)
                    await self.uow.commit()
                return True
            except Exception as e:
                Logger.base.warning(
                    f'⚠️ [CREATE-ORDER] Persist attempt {attempt}/{self.persist_attempts} '
                    f'failed for order {order.id}: {e}'
                )

        Logger.base.critical(
            f'🚨 [RECONCILE] Charged but not stored: order_id={order.id} '
            f'customer_id={order.customer_id} processor={transaction.processor} '
            f'processor_transaction_id={transaction.processor_transaction_id} '
            f'amount={transaction.amount}'
        )
        return False
