"""
Integration test configuration for the commerce repositories.

Catalog rows (events, products, promos) have no command repository in this
service, so they are seeded straight through the ORM models.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Awaitable, Callable, List, Optional
from uuid import UUID

import attrs
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from uuid_utils.compat import uuid7

from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.entity.order_entity import Order
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason
from src.service.commerce.driven_adapter.model.event_model import EventModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.model.promo_model import PromoModel
from src.service.commerce.driven_adapter.repo.customer_command_repo_impl import (
    CustomerCommandRepoImpl,
)
from src.service.commerce.driven_adapter.repo.guest_command_repo_impl import GuestCommandRepoImpl
from src.service.commerce.driven_adapter.repo.order_command_repo_impl import OrderCommandRepoImpl
from test.service.commerce.integration.helpers import add_rows, build_paid_order


@pytest.fixture
async def event(session_maker: async_sessionmaker[AsyncSession]) -> EventModel:
    db_event = EventModel(
        id=uuid7(),
        name='Moustache Bash 2026',
        date=datetime.now(timezone.utc) + timedelta(days=3),
        status='active',
        sales_enabled=True,
        meta={},
    )
    await add_rows(session_maker, db_event)
    return db_event


@pytest.fixture
async def ticket_product(
    session_maker: async_sessionmaker[AsyncSession], event: EventModel
) -> ProductModel:
    db_product = ProductModel(
        id=uuid7(),
        type='ticket',
        name='General Admission',
        description='',
        price=Decimal('50.00'),
        max_quantity=100,
        event_id=event.id,
        admission_tier='general',
        promo=False,
        status='active',
        meta={},
    )
    await add_rows(session_maker, db_product)
    return db_product


@pytest.fixture
async def vip_comp_product(
    session_maker: async_sessionmaker[AsyncSession], event: EventModel
) -> ProductModel:
    db_product = ProductModel(
        id=uuid7(),
        type='ticket',
        name='VIP Comp',
        description='',
        price=Decimal('300.00'),
        event_id=event.id,
        admission_tier='vip',
        promo=True,
        status='active',
        meta={},
    )
    await add_rows(session_maker, db_product)
    return db_product


@pytest.fixture
async def single_use_promo(
    session_maker: async_sessionmaker[AsyncSession], vip_comp_product: ProductModel
) -> PromoModel:
    db_promo = PromoModel(
        id=uuid7(),
        type='single-use',
        status='active',
        product_id=vip_comp_product.id,
        price=Decimal('100.00'),
        product_quantity=2,
        recipient_name='Ada Lovelace',
        meta={},
    )
    await add_rows(session_maker, db_promo)
    return db_promo


@pytest.fixture
async def coupon_promo(session_maker: async_sessionmaker[AsyncSession]) -> PromoModel:
    db_promo = PromoModel(
        id=uuid7(), type='coupon', status='active', percent_discount=Decimal('10'), meta={}
    )
    await add_rows(session_maker, db_promo)
    return db_promo


@pytest.fixture
async def customer(session_maker: async_sessionmaker[AsyncSession]) -> Customer:
    async with session_maker() as session:
        stored = await CustomerCommandRepoImpl(session=session).upsert_by_email(
            customer=Customer.create(
                first_name='Ada', last_name='Lovelace', email='ada@example.com'
            )
        )
        await session.commit()
    return stored

@pytest.fixture
async def paid_order(
    session_maker: async_sessionmaker[AsyncSession],
    customer: Customer,
    ticket_product: ProductModel,
) -> Order:
    order, sale = build_paid_order(customer=customer, product=ticket_product)
    async with session_maker() as session:
        assert await OrderCommandRepoImpl(session=session).create_paid_order(
            order=order, transaction=sale
        )
        await session.commit()
    return order


@pytest.fixture
def make_guests(
    session_maker: async_sessionmaker[AsyncSession], event: EventModel
) -> Callable[..., Awaitable[List[Guest]]]:
    async def _make(
        count: int, *, order_id: Optional[UUID] = None, **overrides: Any
    ) -> List[Guest]:
        reason = CreatedReason.PURCHASE if order_id else CreatedReason.COMP
        guests = [
            Guest.create(
                first_name='Ada',
                last_name='Lovelace' if unit == 0 else f'Lovelace Guest {unit}',
                event_id=event.id,
                admission_tier=AdmissionTier.GENERAL,
                created_reason=reason,
                order_id=order_id,
                created_by='admin-1',
            )
            for unit in range(count)
        ]
        guests = [attrs.evolve(guest, **overrides) for guest in guests]
        async with session_maker() as session:
            stored = await GuestCommandRepoImpl(session=session).create_many(guests=guests)
            await session.commit()
        return stored

    return _make
