"""
Integration tests for OrderCommandRepoImpl

The paid-order write is retried after a successful charge, so inserting the
same pre-generated order id twice must be a no-op rather than a second order.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import TransactionType
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.model.transaction_model import TransactionModel
from src.service.commerce.driven_adapter.repo.order_command_repo_impl import OrderCommandRepoImpl
from test.service.commerce.integration.helpers import build_paid_order


async def _count(session_maker: async_sessionmaker[AsyncSession], model, order_id) -> int:
    async with session_maker() as session:
        result = await session.execute(
            select(func.count()).select_from(model).where(model.order_id == order_id)
        )
        return result.scalar_one()


@pytest.mark.integration
class TestCreatePaidOrder:
    @pytest.mark.asyncio
    async def test_repeated_insert_is_idempotent(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        customer: Customer,
        ticket_product: ProductModel,
    ) -> None:
        """
        Given: A paid order already stored under its pre-generated id
        When: The write is attempted again (retry after a lost acknowledgement)
        Then: The second insert reports False and nothing is duplicated
        """
        order, sale = build_paid_order(customer=customer, product=ticket_product, quantity=2)

        async with session_maker() as session:
            first = await OrderCommandRepoImpl(session=session).create_paid_order(
                order=order, transaction=sale
            )
            await session.commit()

        async with session_maker() as session:
            second = await OrderCommandRepoImpl(session=session).create_paid_order(
                order=order, transaction=sale
            )
            await session.commit()

        assert first is True
        assert second is False
        async with session_maker() as session:
            orders = await session.execute(
                select(func.count()).select_from(OrderModel).where(OrderModel.id == order.id)
            )
            assert orders.scalar_one() == 1
        assert await _count(session_maker, OrderItemModel, order.id) == 1
        assert await _count(session_maker, TransactionModel, order.id) == 1

    @pytest.mark.asyncio
    async def test_stored_order_reads_back_with_items_and_sale(
        self, session_maker: async_sessionmaker[AsyncSession], paid_order: Order
    ) -> None:
        async with session_maker() as session:
            repo = OrderCommandRepoImpl(session=session)
            stored = await repo.get_by_id(order_id=paid_order.id)
            sale = await repo.get_sale_transaction(order_id=paid_order.id)

        assert stored is not None
        assert stored.status == OrderStatus.COMPLETE
        assert stored.amount == Decimal('100.00')
        assert [(item.product_id, item.quantity) for item in stored.items] == [
            (paid_order.items[0].product_id, 2)
        ]
        assert sale is not None
        assert sale.type == TransactionType.SALE
        assert sale.amount == Decimal('100.00')

    @pytest.mark.asyncio
    async def test_rolled_back_write_leaves_nothing(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        customer: Customer,
        ticket_product: ProductModel,
    ) -> None:
        order, sale = build_paid_order(customer=customer, product=ticket_product)

        async with session_maker() as session:
            assert await OrderCommandRepoImpl(session=session).create_paid_order(
                order=order, transaction=sale
            )
            await session.rollback()

        async with session_maker() as session:
            assert await OrderCommandRepoImpl(session=session).get_by_id(order_id=order.id) is None


@pytest.mark.integration
class TestReversal:
    @pytest.mark.asyncio
    async def test_cancel_with_refund_transaction(
        self, session_maker: async_sessionmaker[AsyncSession], paid_order: Order
    ) -> None:
        async with session_maker() as session:
            repo = OrderCommandRepoImpl(session=session)
            sale = await repo.get_sale_transaction(order_id=paid_order.id)
            assert sale is not None
            refund = await repo.add_transaction(
                transaction=sale.reversal(
                    type=TransactionType.REFUND,
                    processor_transaction_id='re_1',
                    processor_created_at=None,
                )
            )
            canceled = await repo.update_status(
                order_id=paid_order.id, status=OrderStatus.CANCELED
            )
            await session.commit()

        assert refund.parent_transaction_id == sale.id
        assert refund.amount == sale.amount
        assert canceled is not None
        assert canceled.status == OrderStatus.CANCELED
        assert await _count(session_maker, TransactionModel, paid_order.id) == 2
