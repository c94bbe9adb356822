"""Builders and fakes shared by the commerce unit tests."""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, List, Mapping, Optional
from unittest.mock import AsyncMock
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.commerce.app.dto.payment_dto import (
    ProcessorTransaction,
    ReversalResult,
    SaleResult,
)
from src.service.commerce.app.interface.i_payment_gateway import IPaymentGateway
from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.event_entity import Event
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.entity.order_entity import Order, OrderItem
from src.service.commerce.domain.entity.product_entity import Product
from src.service.commerce.domain.entity.transaction_entity import Transaction
from src.service.commerce.domain.enum.catalog_enum import EventStatus, ProductType
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import SettlementStatus, TransactionType


def make_event(**overrides: Any) -> Event:
    fields: dict[str, Any] = {
        'id': uuid7(),
        'name': 'Moustache Bash 2026',
        'date': datetime.now(timezone.utc) + timedelta(days=3),
        'status': EventStatus.ACTIVE,
    }
    fields.update(overrides)
    return Event(**fields)


def make_product(**overrides: Any) -> Product:
    fields: dict[str, Any] = {
        'id': uuid7(),
        'type': ProductType.TICKET,
        'name': 'General Admission',
        'price': Decimal('50.00'),
        'event_id': uuid7(),
        'admission_tier': AdmissionTier.GENERAL,
    }
    fields.update(overrides)
    return Product(**fields)


def make_customer(**overrides: Any) -> Customer:
    fields: dict[str, Any] = {
        'id': uuid7(),
        'first_name': 'Ada',
        'last_name': 'Lovelace',
        'email': 'ada@example.com',
    }
    fields.update(overrides)
    return Customer(**fields)


def make_order(*, items: Optional[List[OrderItem]] = None, **overrides: Any) -> Order:
    order_id = overrides.pop('id', None) or uuid7()
    fields: dict[str, Any] = {
        'id': order_id,
        'customer_id': uuid7(),
        'amount': Decimal('100.00'),
        'status': OrderStatus.COMPLETE,
        'items': items or [],
    }
    fields.update(overrides)
    return Order(**fields)


def make_sale(*, order: Order, processor_transaction_id: str = 'pi_sale_1') -> Transaction:
    return Transaction(
        id=uuid7(),
        order_id=order.id,
        processor='fake',
        processor_transaction_id=processor_transaction_id,
        type=TransactionType.SALE,
        amount=order.amount,
    )


def make_guest(**overrides: Any) -> Guest:
    fields: dict[str, Any] = {
        'id': uuid7(),
        'first_name': 'Ada',
        'last_name': 'Lovelace',
        'admission_tier': AdmissionTier.GENERAL,
        'event_id': uuid7(),
        'created_reason': CreatedReason.PURCHASE,
        'ticket_seed': f'seed-{uuid7().hex}',
        'order_id': uuid7(),
        'status': GuestStatus.ACTIVE,
    }
    fields.update(overrides)
    return Guest(**fields)


class FakeUnitOfWork(AbstractUnitOfWork):
    """Every repository is an AsyncMock unless a test assigns a fake."""

    def __init__(self) -> None:
        self.catalog_query_repo = AsyncMock()
        self.customer_command_repo = AsyncMock()
        self.promo_command_repo = AsyncMock()
        self.order_command_repo = AsyncMock()
        self.order_query_repo = AsyncMock()
        self.guest_command_repo = AsyncMock()
        self.guest_query_repo = AsyncMock()
        self.inventory_command_repo = AsyncMock()
        self.follow_up_task_repo = AsyncMock()
        self.commits = 0
        self.rollbacks = 0

    async def _commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class FakeUnitOfWorkFactory:
    """Stands in for UnitOfWorkFactory: hands out the same FakeUnitOfWork every time."""

    def __init__(self, uow: FakeUnitOfWork) -> None:
        self.uow = uow

    def __call__(self) -> FakeUnitOfWork:
        return self.uow


class FakePaymentGateway(IPaymentGateway):
    def __init__(
        self,
        *,
        decline_message: Optional[str] = None,
        sale_error: Optional[Exception] = None,
        settlement_status: SettlementStatus = SettlementStatus.SETTLED,
    ) -> None:
        self.decline_message = decline_message
        self.sale_error = sale_error
        self.settlement_status = settlement_status
        self.sales: List[dict[str, Any]] = []
        self.refunds: List[str] = []
        self.voids: List[str] = []
        self.finds: List[str] = []

    @property
    def processor(self) -> str:
        return 'fake'

    async def sale(
        self, *, amount: Decimal, payment_credential: str, metadata: Mapping[str, str]
    ) -> SaleResult:
        self.sales.append(
            {'amount': amount, 'payment_credential': payment_credential, 'metadata': dict(metadata)}
        )
        if self.sale_error is not None:
            raise self.sale_error
        if self.decline_message is not None:
            return SaleResult(success=False, message=self.decline_message)
        return SaleResult(
            success=True,
            transaction_id=f'pi_{len(self.sales)}',
            created_at=datetime.now(timezone.utc),
        )

    async def find(self, *, transaction_id: str) -> ProcessorTransaction:
        self.finds.append(transaction_id)
        return ProcessorTransaction(transaction_id=transaction_id, status=self.settlement_status)

    async def refund(self, *, transaction_id: str, amount: Decimal) -> ReversalResult:
        self.refunds.append(transaction_id)
        return ReversalResult(success=True, transaction_id=f're_{transaction_id}')

    async def void(self, *, transaction_id: str) -> ReversalResult:
        self.voids.append(transaction_id)
        return ReversalResult(success=True, transaction_id=transaction_id)


class InMemoryGuestCommandRepo:
    """
    Just enough of IGuestCommandRepo to exercise the conditional transitions.
    Each write yields to the event loop first, like a database round-trip would.
    """

    def __init__(self, guests: List[Guest]) -> None:
        self.guests = {guest.id: guest for guest in guests}

    async def get_by_id(self, *, guest_id: UUID) -> Optional[Guest]:
        await asyncio.sleep(0)
        return self.guests.get(guest_id)

    async def check_in_atomically(
        self, *, guest_id: UUID, scanned_by: Optional[str], check_in_time: datetime
    ) -> Optional[Guest]:
        await asyncio.sleep(0)
        guest = self.guests.get(guest_id)
        if guest is None or guest.status != GuestStatus.ACTIVE:
            return None
        checked_in = attrs.evolve(
            guest, status=GuestStatus.CHECKED_IN, check_in_time=check_in_time, updated_by=scanned_by
        )
        self.guests[guest_id] = checked_in
        return checked_in

    async def archive_atomically(
        self, *, guest_id: UUID, updated_by: Optional[str]
    ) -> Optional[Guest]:
        await asyncio.sleep(0)
        guest = self.guests.get(guest_id)
        if guest is None or guest.status != GuestStatus.ACTIVE:
            return None
        archived = attrs.evolve(guest, status=GuestStatus.ARCHIVED, updated_by=updated_by)
        self.guests[guest_id] = archived
        return archived


class InMemoryGuestQueryRepo:
    def __init__(self, *, command_repo: InMemoryGuestCommandRepo, event: Event) -> None:
        self.command_repo = command_repo
        self.event = event

    async def get_ticket_by_seed(self, *, ticket_seed: str):
        from src.service.commerce.app.dto.ticket_view import TicketView

        await asyncio.sleep(0)
        for guest in self.command_repo.guests.values():
            if guest.ticket_seed == ticket_seed:
                return TicketView(guest=guest, event=self.event)
        return None
