"""
Unit tests for CreateOrderUseCase

Test Focus:
1. Happy path: price, charge once, persist order + sale + follow-up tasks
2. Single-use promo: claimed before the charge, released when the sale fails, loser rejected
3. Persist failure after a successful charge never fails the request
"""

from decimal import Decimal
from typing import Any, List
from unittest.mock import AsyncMock

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import (
    InvalidError,
    NotFoundError,
    PaymentDeclinedError,
    PaymentProcessorError,
)
from src.service.commerce.app.command.create_order_use_case import CreateOrderUseCase
from src.service.commerce.app.command.process_follow_up_tasks_use_case import (
    ProcessFollowUpTasksUseCase,
)
from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.domain.entity.follow_up_task_entity import FollowUpTask
from src.service.commerce.domain.entity.promo_entity import Promo
from src.service.commerce.domain.enum.catalog_enum import ProductType, PromoType
from src.service.commerce.domain.enum.guest_enum import CreatedReason
from src.service.commerce.domain.enum.order_status import OrderStatus
from src.service.commerce.domain.enum.payment_enum import FollowUpTaskKind, TransactionType
from src.service.commerce.domain.value_object.cart import CartLine
from src.service.commerce.domain.value_object.customer_info import CustomerInfo
from test.service.commerce.unit.helpers import (
    FakePaymentGateway,
    FakeUnitOfWork,
    FakeUnitOfWorkFactory,
    make_product,
)


BUYER = CustomerInfo(first_name='Ada', last_name='Lovelace', email='Ada@Example.com')


def _echo_customer(*, customer: Customer) -> Customer:
    return customer


@pytest.mark.unit
class TestCreateOrder:
    @pytest.fixture
    def general_admission(self):
        return make_product(price=Decimal('50'))

    @pytest.fixture
    def uow(self, general_admission) -> FakeUnitOfWork:
        uow = FakeUnitOfWork()
        uow.catalog_query_repo.get_products = AsyncMock(return_value=[general_admission])
        uow.customer_command_repo.upsert_by_email = AsyncMock(side_effect=_echo_customer)
        uow.order_command_repo.create_paid_order = AsyncMock(return_value=True)
        return uow

    @pytest.mark.asyncio
    async def test_general_admission_times_two(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, general_admission
    ) -> None:
        """
        Given: GA at 50.00, cart of 2
        When: The order is placed
        Then:
          - The card is charged exactly once for 100.00
          - Order, sale transaction and a guest fan-out task are persisted together
          - The confirmation id is the processor transaction id
        """
        use_case = CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway)

        result = await use_case.execute(
            payment_credential='pm_card_visa',
            cart=[CartLine(product_id=general_admission.id, quantity=2)],
            customer=BUYER,
        )

        assert len(payment_gateway.sales) == 1
        assert payment_gateway.sales[0]['amount'] == Decimal('100.00')
        assert payment_gateway.sales[0]['metadata']['order_id'] == str(result.order.id)

        assert result.persisted
        assert result.order.amount == Decimal('100.00')
        assert result.order.status == OrderStatus.COMPLETE
        assert [(i.product_id, i.quantity) for i in result.order.items] == [
            (general_admission.id, 2)
        ]
        assert result.transaction.type == TransactionType.SALE
        assert result.transaction.processor_transaction_id == 'pi_1'
        assert result.customer.email == 'ada@example.com'

        uow.order_command_repo.create_paid_order.assert_awaited_once()
        [tasks] = [
            call.kwargs['tasks'] for call in uow.follow_up_task_repo.add_many.await_args_list
        ]
        assert [task.kind for task in tasks] == [FollowUpTaskKind.CREATE_PURCHASE_GUESTS]

    @pytest.mark.asyncio
    async def test_guest_fan_out_creates_one_guest_per_unit(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, general_admission
    ) -> None:
        """
        Given: A paid GA x 2 order
        When: Its follow-up tasks run
        Then: Two purchase guests exist, named after the buyer
        """
        result = await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
            payment_credential='pm_card_visa',
            cart=[CartLine(product_id=general_admission.id, quantity=2)],
            customer=BUYER,
        )
        tasks: List[FollowUpTask] = uow.follow_up_task_repo.add_many.await_args.kwargs['tasks']

        uow.follow_up_task_repo.list_runnable = AsyncMock(return_value=tasks)
        uow.follow_up_task_repo.get_runnable = AsyncMock(side_effect=tasks)
        uow.order_command_repo.get_by_id = AsyncMock(return_value=result.order)
        uow.customer_command_repo.get_by_id = AsyncMock(return_value=result.customer)
        uow.guest_command_repo.create_many = AsyncMock(side_effect=lambda *, guests: guests)

        run = await ProcessFollowUpTasksUseCase(uow_factory=FakeUnitOfWorkFactory(uow)).execute(
            order_id=result.order.id
        )

        assert (run.done, run.failed, run.skipped) == (1, 0, 0)
        guests = uow.guest_command_repo.create_many.await_args.kwargs['guests']
        assert [(g.first_name, g.last_name) for g in guests] == [
            ('Ada', 'Lovelace'),
            ('Ada', 'Lovelace Guest 1'),
        ]
        assert all(g.created_reason == CreatedReason.PURCHASE for g in guests)
        assert all(g.order_id == result.order.id for g in guests)
        assert all(g.event_id == general_admission.event_id for g in guests)
        assert len({g.ticket_seed for g in guests}) == 2

    @pytest.mark.asyncio
    async def test_limited_product_schedules_roll_over(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway
    ) -> None:
        early_bird = make_product(price=Decimal('30'), max_quantity=100)
        parking = make_product(type=ProductType.ACCOMMODATION, price=Decimal('10'), event_id=None)
        uow.catalog_query_repo.get_products = AsyncMock(return_value=[early_bird, parking])

        await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
            payment_credential='pm_card_visa',
            cart=[
                CartLine(product_id=early_bird.id, quantity=1),
                CartLine(product_id=parking.id, quantity=1),
            ],
            customer=BUYER,
        )

        tasks = uow.follow_up_task_repo.add_many.await_args.kwargs['tasks']
        assert [task.kind for task in tasks] == [
            FollowUpTaskKind.CREATE_PURCHASE_GUESTS,
            FollowUpTaskKind.ROLL_OVER_INVENTORY,
        ]
        assert tasks[1].payload['product_ids'] == [str(early_bird.id)]

    @pytest.mark.asyncio
    async def test_same_product_on_two_lines_becomes_one_item(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, general_admission
    ) -> None:
        result = await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
            payment_credential='pm_card_visa',
            cart=[
                CartLine(product_id=general_admission.id, quantity=1),
                CartLine(product_id=general_admission.id, quantity=2),
            ],
            customer=BUYER,
        )

        assert [(i.product_id, i.quantity) for i in result.order.items] == [
            (general_admission.id, 3)
        ]
        assert result.order.amount == Decimal('150.00')

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'overrides',
        [
            {'payment_credential': ''},
            {'cart': []},
            {'customer': None},
            {'customer': CustomerInfo(first_name='Ada', last_name='', email='ada@example.com')},
        ],
    )
    async def test_invalid_payment_parameters(
        self,
        uow: FakeUnitOfWork,
        payment_gateway: FakePaymentGateway,
        general_admission,
        overrides: dict[str, Any],
    ) -> None:
        kwargs: dict[str, Any] = {
            'payment_credential': 'pm_card_visa',
            'cart': [CartLine(product_id=general_admission.id, quantity=1)],
            'customer': BUYER,
        }
        kwargs.update(overrides)

        with pytest.raises(InvalidError, match='Invalid payment parameters'):
            await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(**kwargs)

        assert payment_gateway.sales == []

    @pytest.mark.asyncio
    async def test_unknown_promo(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, general_admission
    ) -> None:
        uow.catalog_query_repo.get_promo = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match='Promo not found'):
            await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
                payment_credential='pm_card_visa',
                cart=[CartLine(product_id=general_admission.id, quantity=1)],
                customer=BUYER,
                promo_id=uuid7(),
            )

        assert payment_gateway.sales == []

    @pytest.mark.asyncio
    async def test_persist_failure_after_charge_still_reports_order(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, general_admission
    ) -> None:
        """
        Given: The database rejects every write after the card was charged
        When: The order is placed
        Then: The caller still gets the order back, marked as not persisted, and the
              card was charged once only
        """
        uow.order_command_repo.create_paid_order = AsyncMock(
            side_effect=ConnectionError('database went away')
        )
        use_case = CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway)

        result = await use_case.execute(
            payment_credential='pm_card_visa',
            cart=[CartLine(product_id=general_admission.id, quantity=1)],
            customer=BUYER,
        )

        assert not result.persisted
        assert len(payment_gateway.sales) == 1
        assert uow.order_command_repo.create_paid_order.await_count == use_case.persist_attempts
        uow.follow_up_task_repo.add_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repeated_persist_is_a_no_op(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, general_admission
    ) -> None:
        # A retry that finds the order already stored must not enqueue tasks twice
        uow.order_command_repo.create_paid_order = AsyncMock(return_value=False)

        result = await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
            payment_credential='pm_card_visa',
            cart=[CartLine(product_id=general_admission.id, quantity=1)],
            customer=BUYER,
        )

        assert result.persisted
        uow.follow_up_task_repo.add_many.assert_not_awaited()


@pytest.mark.unit
class TestCreateOrderWithSingleUsePromo:
    @pytest.fixture
    def vip_comp(self):
        return make_product(price=Decimal('300'), promo=True)

    @pytest.fixture
    def promo(self, vip_comp) -> Promo:
        return Promo(
            id=uuid7(),
            type=PromoType.SINGLE_USE,
            product_id=vip_comp.id,
            price=Decimal('100'),
            product_quantity=2,
        )

    @pytest.fixture
    def uow(self, vip_comp, promo: Promo) -> FakeUnitOfWork:
        uow = FakeUnitOfWork()
        uow.catalog_query_repo.get_products = AsyncMock(return_value=[vip_comp])
        uow.catalog_query_repo.get_promo = AsyncMock(return_value=promo)
        uow.customer_command_repo.upsert_by_email = AsyncMock(side_effect=_echo_customer)
        uow.promo_command_repo.claim_single_use = AsyncMock(return_value=True)
        uow.order_command_repo.create_paid_order = AsyncMock(return_value=True)
        return uow

    @pytest.mark.asyncio
    async def test_promo_claimed_and_price_applied(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, vip_comp, promo: Promo
    ) -> None:
        result = await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
            payment_credential='pm_card_visa',
            cart=[CartLine(product_id=vip_comp.id, quantity=2)],
            customer=BUYER,
            promo_id=promo.id,
        )

        uow.promo_command_repo.claim_single_use.assert_awaited_once_with(promo_id=promo.id)
        assert payment_gateway.sales[0]['amount'] == Decimal('200.00')
        assert payment_gateway.sales[0]['metadata']['promo_id'] == str(promo.id)
        assert result.order.promo_id == promo.id

    @pytest.mark.asyncio
    async def test_losing_the_claim_race_is_rejected_before_charging(
        self, uow: FakeUnitOfWork, payment_gateway: FakePaymentGateway, vip_comp, promo: Promo
    ) -> None:
        uow.promo_command_repo.claim_single_use = AsyncMock(return_value=False)

        with pytest.raises(InvalidError, match='Invalid promo code'):
            await CreateOrderUseCase(uow=uow, payment_gateway=payment_gateway).execute(
                payment_credential='pm_card_visa',
                cart=[CartLine(product_id=vip_comp.id, quantity=1)],
                customer=BUYER,
                promo_id=promo.id,
            )

        assert payment_gateway.sales == []
        uow.order_command_repo.create_paid_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_decline_releases_the_claim(
        self, uow: FakeUnitOfWork, vip_comp, promo: Promo
    ) -> None:
        """
        Given: A claimed single-use promo
        When: The processor declines the card
        Then: PAYMENT_DECLINED with the processor message, the promo is usable again,
              and nothing about the order is stored
        """
        gateway = FakePaymentGateway(decline_message='Your card has insufficient funds.')

        with pytest.raises(PaymentDeclinedError) as exc_info:
            await CreateOrderUseCase(uow=uow, payment_gateway=gateway).execute(
                payment_credential='pm_card_chargeDeclined',
                cart=[CartLine(product_id=vip_comp.id, quantity=1)],
                customer=BUYER,
                promo_id=promo.id,
            )

        assert exc_info.value.message == 'Order error: "Your card has insufficient funds."'
        assert exc_info.value.status_code == 402
        uow.promo_command_repo.release_claim.assert_awaited_once_with(promo_id=promo.id)
        uow.order_command_repo.create_paid_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_processor_error_releases_the_claim(
        self, uow: FakeUnitOfWork, vip_comp, promo: Promo
    ) -> None:
        """
        Given: A claimed single-use promo
        When: The processor call itself fails (network error, API outage)
        Then: The error propagates, the promo is usable again, and no order is stored
        """
        gateway = FakePaymentGateway(sale_error=PaymentProcessorError('connection reset'))

        with pytest.raises(PaymentProcessorError, match='connection reset'):
            await CreateOrderUseCase(uow=uow, payment_gateway=gateway).execute(
                payment_credential='pm_card_visa',
                cart=[CartLine(product_id=vip_comp.id, quantity=1)],
                customer=BUYER,
                promo_id=promo.id,
            )

        uow.promo_command_repo.claim_single_use.assert_awaited_once_with(promo_id=promo.id)
        uow.promo_command_repo.release_claim.assert_awaited_once_with(promo_id=promo.id)
        uow.order_command_repo.create_paid_order.assert_not_awaited()
