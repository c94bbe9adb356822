from typing import Optional
from uuid import UUID

from sqlalchemy import select, update as sql_update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_order_command_repo import IOrderCommandRepo
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import TransactionType
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.commerce.driven_adapter.model.transaction_model import TransactionModel
from src.service.commerce.driven_adapter.repo._mapper import (
    order_to_entity,
    transaction_to_entity,
)


class OrderCommandRepoImpl(IOrderCommandRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    async def _load_items(self, *, order_id: UUID) -> list[OrderItemModel]:
        result = await self.session.execute(
            select(OrderItemModel)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.product_id)
        )
        return list(result.scalars().all())

    @staticmethod
    def _order_values(order: Order) -> dict:
        return {
            'id': order.id,
            'customer_id': order.customer_id,
            'amount': order.amount,
            'status': order.status.value,
            'promo_id': order.promo_id,
            'parent_order_id': order.parent_order_id,
        }

    @staticmethod
    def _transaction_values(transaction: Transaction) -> dict:
        return {
            'id': transaction.id,
            'order_id': transaction.order_id,
            'processor': transaction.processor,
            'processor_transaction_id': transaction.processor_transaction_id,
            'processor_created_at': transaction.processor_created_at,
            'type': transaction.type.value,
            'amount': transaction.amount,
            'parent_transaction_id': transaction.parent_transaction_id,
        }

    @Logger.io
    async def create_paid_order(self, *, order: Order, transaction: Transaction) -> bool:
        # ON CONFLICT DO NOTHING on the pre-generated id makes a retried write a no-op
        order_stmt = (
            insert(OrderModel)
            .values(**self._order_values(order))
            .on_conflict_do_nothing(index_elements=[OrderModel.id])
            .returning(OrderModel.id)
        )
        result = await self.session.execute(order_stmt)
        if result.scalar_one_or_none() is None:
            Logger.base.warning(f'⚠️ [ORDER] Order {order.id} already stored, skipping insert')
            return False

        if order.items:
            await self.session.execute(
                insert(OrderItemModel),
                [
                    {
                        'order_id': order.id,
                        'product_id': item.product_id,
                        'quantity': item.quantity,
                    }
                    for item in order.items
                ],
            )

        await self.session.execute(
            insert(TransactionModel).values(**self._transaction_values(transaction))
        )
        return True

    @Logger.io
    async def create_transfer_child(self, *, order: Order) -> Order:
        result = await self.session.execute(
            insert(OrderModel).values(**self._order_values(order)).returning(OrderModel)
        )
        return order_to_entity(result.scalar_one(), [])

    @Logger.io
    async def get_by_id(self, *, order_id: UUID) -> Optional[Order]:
        # FOR UPDATE: refund and transfer of the same order serialize here
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id).with_for_update()
        )
        db_order = result.scalar_one_or_none()
        if db_order is None:
            return None
        return order_to_entity(db_order, await self._load_items(order_id=order_id))

    @Logger.io
    async def get_sale_transaction(self, *, order_id: UUID) -> Optional[Transaction]:
        result = await self.session.execute(
            select(TransactionModel).where(
                TransactionModel.order_id == order_id,
                TransactionModel.type == TransactionType.SALE.value,
            )
        )
        db_transaction = result.scalar_one_or_none()
        return transaction_to_entity(db_transaction) if db_transaction else None

    @Logger.io
    async def add_transaction(self, *, transaction: Transaction) -> Transaction:
        result = await self.session.execute(
            insert(TransactionModel)
            .values(**self._transaction_values(transaction))
            .returning(TransactionModel)
        )
        return transaction_to_entity(result.scalar_one())

    @Logger.io
    async def update_status(self, *, order_id: UUID, status: OrderStatus) -> Optional[Order]:
        result = await self.session.execute(
            sql_update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(status=status.value, updated_at=func.now())
            .returning(OrderModel)
        )
        db_order = result.scalar_one_or_none()
        if db_order is None:
            return None
        return order_to_entity(db_order, await self._load_items(order_id=order_id))
