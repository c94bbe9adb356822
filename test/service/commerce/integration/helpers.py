from datetime import datetime, timezone
from typing import Any, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from uuid_utils.compat import uuid7

from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.order_entity import Order, OrderItem
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.driven_adapter.model.product_model import ProductModel


async def add_rows(session_maker: async_sessionmaker[AsyncSession], *rows: Any) -> None:
    async with session_maker() as session:
        session.add_all(rows)
        await session.commit()


def build_paid_order(
    *, customer: Customer, product: ProductModel, quantity: int = 2
) -> Tuple[Order, Transaction]:
    order_id = uuid7()
    order = Order.create_paid(
        id=order_id,
        customer_id=customer.id,
        amount=product.price * quantity,
        items=[OrderItem(order_id=order_id, product_id=product.id, quantity=quantity)],
    )
    sale = Transaction.sale(
        order_id=order_id,
        processor='fake',
        processor_transaction_id=f'pi_{order_id.hex[:12]}',
        processor_created_at=datetime.now(timezone.utc),
        amount=order.amount,
    )
    return order, sale
