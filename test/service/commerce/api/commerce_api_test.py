"""
HTTP contract of the commerce API

Use cases are replaced through dependency overrides, so these tests cover
routing, staff authentication, request validation and the error envelope
({"detail", "code", "context"}) without a database.

Test Focus:
1. POST /api/orders answers 201 with confirmation id, order id and ticket link token
2. Staff routes: 401 without a token, 403 for the wrong role
3. Domain errors keep their status code, code and context
"""

from decimal import Decimal
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
import pytest
from uuid_utils.compat import uuid7

from src.platform.config.di import container
from src.platform.exception.exceptions import (
    GuestAlreadyCheckedInError,
    NotFoundError,
    PaymentDeclinedError,
    UnauthorizedError,
)
from src.service.commerce.app.command.check_in_with_ticket_use_case import (
    CheckInWithTicketUseCase,
)
from src.service.commerce.app.command.create_order_use_case import CreateOrderUseCase
from src.service.commerce.app.command.process_follow_up_tasks_use_case import (
    ProcessFollowUpTasksUseCase,
)
from src.service.commerce.app.command.send_order_notifications_use_case import (
    SendOrderNotificationsUseCase,
)
from src.service.commerce.app.dto.order_result import OrderResult
from src.service.commerce.app.dto.ticket_view import TicketView
from src.service.commerce.app.query.get_customer_tickets_use_case import (
    GetCustomerTicketsUseCase,
)
from src.service.commerce.app.query.get_order_use_case import GetOrderUseCase
from src.service.commerce.app.query.list_orders_use_case import ListOrdersUseCase
from src.service.commerce.domain.enum.guest_enum import GuestStatus
from test.service.commerce.unit.helpers import (
    make_customer,
    make_event,
    make_guest,
    make_order,
    make_sale,
)


ORDER_BODY = {
    'payment_credential': 'pm_card_visa',
    'cart': [{'product_id': str(uuid7()), 'quantity': 2}],
    'customer': {'first_name': 'Ada', 'last_name': 'Lovelace', 'email': 'ada@example.com'},
}


class TestCreateOrderApi:
    @pytest.fixture
    def background(self, override):
        follow_up, notify = AsyncMock(), AsyncMock()
        override(ProcessFollowUpTasksUseCase.depends, follow_up)
        override(SendOrderNotificationsUseCase.depends, notify)
        return follow_up, notify

    def test_order_placed(self, client: TestClient, override, background) -> None:
        """
        Given: A valid cart and card
        When: POST /api/orders
        Then: 201 with the processor confirmation id and a token that opens this order,
              guest fan-out and notifications queued after the response
        """
        customer = make_customer()
        order = make_order(customer_id=customer.id, amount=Decimal('100'))
        use_case = AsyncMock()
        use_case.execute.return_value = OrderResult(
            order=order,
            transaction=make_sale(order=order, processor_transaction_id='pi_abc'),
            customer=customer,
        )
        override(CreateOrderUseCase.depends, use_case)

        response = client.post('/api/orders', json=ORDER_BODY)

        assert response.status_code == 201
        body = response.json()
        assert body['confirmation_id'] == 'pi_abc'
        assert body['order_id'] == str(order.id)
        assert container.order_token_service().verify(token=body['token']) == order.id

        kwargs = use_case.execute.await_args.kwargs
        assert kwargs['payment_credential'] == 'pm_card_visa'
        assert [line.quantity for line in kwargs['cart']] == [2]
        assert kwargs['customer'].email == 'ada@example.com'

        follow_up, notify = background
        follow_up.execute.assert_awaited_once_with(order_id=order.id)
        notify.execute.assert_awaited_once()

    def test_unpersisted_order_skips_fan_out(
        self, client: TestClient, override, background
    ) -> None:
        customer = make_customer()
        order = make_order(customer_id=customer.id)
        use_case = AsyncMock()
        use_case.execute.return_value = OrderResult(
            order=order, transaction=make_sale(order=order), customer=customer, persisted=False
        )
        override(CreateOrderUseCase.depends, use_case)

        response = client.post('/api/orders', json=ORDER_BODY)

        assert response.status_code == 201
        follow_up, _ = background
        follow_up.execute.assert_not_awaited()

    def test_declined(self, client: TestClient, override, background) -> None:
        use_case = AsyncMock()
        use_case.execute.side_effect = PaymentDeclinedError(
            'Order error: "Your card was declined."'
        )
        override(CreateOrderUseCase.depends, use_case)

        response = client.post('/api/orders', json=ORDER_BODY)

        assert response.status_code == 402
        assert response.json() == {
            'detail': 'Order error: "Your card was declined."',
            'code': 'PAYMENT_DECLINED',
            'context': {},
        }

    def test_malformed_cart(self, client: TestClient, override, background) -> None:
        override(CreateOrderUseCase.depends, AsyncMock())

        response = client.post('/api/orders', json={**ORDER_BODY, 'cart': [{'quantity': 'two'}]})

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID'


class TestStaffAuthApi:
    def test_admin_route_without_token(self, client: TestClient, override) -> None:
        override(ListOrdersUseCase.depends, AsyncMock())

        response = client.get('/api/orders')

        assert response.status_code == 401
        assert response.json()['code'] == 'UNAUTHORIZED'

    def test_doorman_cannot_list_orders(
        self, client: TestClient, override, doorman_headers: dict[str, str]
    ) -> None:
        override(ListOrdersUseCase.depends, AsyncMock())

        response = client.get('/api/orders', headers=doorman_headers)

        assert response.status_code == 403
        assert response.json()['code'] == 'NOT_PERMITTED'

    def test_admin_lists_orders(
        self, client: TestClient, override, admin_headers: dict[str, str]
    ) -> None:
        order = make_order()
        use_case = AsyncMock()
        use_case.list_orders.return_value = [order]
        override(ListOrdersUseCase.depends, use_case)

        response = client.get('/api/orders', headers=admin_headers, params={'limit': 5})

        assert response.status_code == 200
        assert [item['id'] for item in response.json()] == [str(order.id)]
        assert use_case.list_orders.await_args.kwargs['limit'] == 5

    def test_unknown_order(
        self, client: TestClient, override, admin_headers: dict[str, str]
    ) -> None:
        order_id = uuid7()
        use_case = AsyncMock()
        use_case.get_order.side_effect = NotFoundError(
            'Order not found', context={'order_id': str(order_id)}
        )
        override(GetOrderUseCase.depends, use_case)

        response = client.get(f'/api/orders/{order_id}', headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {
            'detail': 'Order not found',
            'code': 'NOT_FOUND',
            'context': {'order_id': str(order_id)},
        }


class TestTicketApi:
    def test_check_in(self, client: TestClient, override, doorman_headers: dict[str, str]) -> None:
        guest = make_guest(status=GuestStatus.CHECKED_IN)
        use_case = AsyncMock()
        use_case.execute.return_value = guest
        override(CheckInWithTicketUseCase.depends, use_case)

        response = client.post(
            '/api/check-ins',
            json={'ticket_credential': guest.ticket_seed},
            headers=doorman_headers,
        )

        assert response.status_code == 201
        assert response.json()['status'] == 'checked_in'
        use_case.execute.assert_awaited_once_with(
            ticket_credential=guest.ticket_seed, scanned_by='door-1'
        )

    def test_second_scan_carries_context(
        self, client: TestClient, override, doorman_headers: dict[str, str]
    ) -> None:
        ticket = TicketView(guest=make_guest(status=GuestStatus.CHECKED_IN), event=make_event())
        use_case = AsyncMock()
        use_case.execute.side_effect = GuestAlreadyCheckedInError(ticket.to_context())
        override(CheckInWithTicketUseCase.depends, use_case)

        response = client.post(
            '/api/check-ins', json={'ticket_credential': 'seed'}, headers=doorman_headers
        )

        assert response.status_code == 409
        body = response.json()
        assert body['code'] == 'GUEST_ALREADY_CHECKED_IN'
        assert body['context']['guest']['id'] == str(ticket.guest.id)
        assert body['context']['event']['name'] == ticket.event.name

    def test_check_in_requires_credential(
        self, client: TestClient, override, doorman_headers: dict[str, str]
    ) -> None:
        override(CheckInWithTicketUseCase.depends, AsyncMock())

        response = client.post('/api/check-ins', json={}, headers=doorman_headers)

        assert response.status_code == 400

    def test_my_tickets_with_bad_link(self, client: TestClient, override) -> None:
        use_case = AsyncMock()
        use_case.execute.side_effect = UnauthorizedError('Invalid ticket link')
        override(GetCustomerTicketsUseCase.depends, use_case)

        response = client.get('/api/my-tickets', params={'t': 'not-a-token'})

        assert response.status_code == 401
        assert response.json()['detail'] == 'Invalid ticket link'

    def test_my_tickets(self, client: TestClient, override) -> None:
        event = make_event()
        guest = make_guest(event_id=event.id)
        use_case = AsyncMock()
        use_case.execute.return_value = [TicketView(guest=guest, event=event)]
        override(GetCustomerTicketsUseCase.depends, use_case)

        response = client.get('/api/my-tickets', params={'t': 'token'})

        assert response.status_code == 200
        [ticket] = response.json()
        assert ticket['qr_payload'] == guest.ticket_seed
        assert ticket['event']['id'] == str(event.id)


def test_health(client: TestClient) -> None:
    response = client.get('/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'
