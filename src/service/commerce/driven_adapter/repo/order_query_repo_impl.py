from collections import defaultdict
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.commerce.driven_adapter.model.transaction_model import TransactionModel
from src.service.commerce.driven_adapter.repo._mapper import (
    order_to_entity,
    transaction_to_entity,
)


class OrderQueryRepoImpl(IOrderQueryRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    async def _items_by_order(self, order_ids: List[UUID]) -> dict[UUID, List[OrderItemModel]]:
        items: dict[UUID, List[OrderItemModel]] = defaultdict(list)
        if not order_ids:
            return items
        result = await self.session.execute(
            select(OrderItemModel)
            .where(OrderItemModel.order_id.in_(order_ids))
            .order_by(OrderItemModel.product_id)
        )
        for item in result.scalars().all():
            items[item.order_id].append(item)
        return items

    @Logger.io
    async def get_by_id(self, *, order_id: UUID) -> Optional[Order]:
        db_order = await self.session.get(OrderModel, order_id)
        if db_order is None:
            return None
        items = await self._items_by_order([order_id])
        return order_to_entity(db_order, items[order_id])

    @Logger.io
    async def list_orders(
        self,
        *,
        customer_id: Optional[UUID] = None,
        status: Optional[OrderStatus] = None,
        limit: int = 100,
    ) -> List[Order]:
        query = select(OrderModel)
        if customer_id is not None:
            query = query.where(OrderModel.customer_id == customer_id)
        if status is not None:
            query = query.where(OrderModel.status == status.value)
        query = query.order_by(OrderModel.created_at.desc()).limit(limit)

        db_orders = list((await self.session.execute(query)).scalars().all())
        items = await self._items_by_order([db_order.id for db_order in db_orders])
        return [order_to_entity(db_order, items[db_order.id]) for db_order in db_orders]

    @Logger.io
    async def list_transactions(self, *, order_id: UUID) -> List[Transaction]:
        result = await self.session.execute(
            select(TransactionModel)
            .where(TransactionModel.order_id == order_id)
            .order_by(TransactionModel.created_at)
        )
        return [transaction_to_entity(row) for row in result.scalars().all()]
