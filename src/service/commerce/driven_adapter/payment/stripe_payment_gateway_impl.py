"""
Stripe Payment Gateway

Sales are PaymentIntents confirmed immediately with the PaymentMethod id the
browser collected. The stripe SDK is synchronous, so every call runs in a
worker thread.
"""

from datetime import datetime, timezone
from decimal import Decimal
import functools
from typing import Any, Callable, Mapping, Optional

import anyio
import stripe

from src.platform.exception.exceptions import PaymentProcessorError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.payment_dto import (
    ProcessorTransaction,
    ReversalResult,
    SaleResult,
)
from src.service.commerce.app.interface.i_payment_gateway import IPaymentGateway
from src.service.commerce.domain.enum.payment_enum import SettlementStatus
from src.service.commerce.domain.money import to_minor_units


PAYMENT_INTENT_STATUS_MAP = {
    'succeeded': SettlementStatus.SETTLED,
    'processing': SettlementStatus.SETTLING,
    'requires_capture': SettlementStatus.AUTHORIZED,
    'canceled': SettlementStatus.VOIDED,
}

SUCCESSFUL_REFUND_STATUSES = frozenset({'succeeded', 'pending'})


def _from_timestamp(value: Optional[int]) -> Optional[datetime]:
    return datetime.fromtimestamp(value, tz=timezone.utc) if value else None


class StripePaymentGatewayImpl(IPaymentGateway):
    def __init__(self, *, api_key: str, currency: str = 'usd', processor_name: str = 'stripe'):
        self.api_key = api_key
        self.currency = currency
        self._processor_name = processor_name

    @property
    def processor(self) -> str:
        return self._processor_name

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await anyio.to_thread.run_sync(
                functools.partial(func, *args, api_key=self.api_key, **kwargs)
            )
        except stripe.CardError:
            raise
        except stripe.StripeError as e:
            raise PaymentProcessorError(
                f'Payment processor error: {e.user_message or e}',
                context={'processor': self.processor, 'stripe_code': e.code},
            ) from e

    @Logger.io
    async def sale(
        self, *, amount: Decimal, payment_credential: str, metadata: Mapping[str, str]
    ) -> SaleResult:
        try:
            intent = await self._call(
                stripe.PaymentIntent.create,
                amount=to_minor_units(amount),
                currency=self.currency,
                payment_method=payment_credential,
                confirm=True,
                metadata=dict(metadata),
                automatic_payment_methods={'enabled': True, 'allow_redirects': 'never'},
            )
        except stripe.CardError as e:
            Logger.base.warning(f'💳 [STRIPE] Card declined: {e.code}')
            return SaleResult(success=False, message=e.user_message or 'Card declined')

        status = PAYMENT_INTENT_STATUS_MAP.get(intent.status, SettlementStatus.FAILED)
        if status not in (SettlementStatus.SETTLED, SettlementStatus.SETTLING):
            # requires_action / requires_payment_method: the charge did not go through
            return SaleResult(
                success=False,
                transaction_id=intent.id,
                message=f'Payment not completed ({intent.status})',
            )

        Logger.base.info(f'💳 [STRIPE] PaymentIntent {intent.id} {intent.status}')
        return SaleResult(
            success=True, transaction_id=intent.id, created_at=_from_timestamp(intent.created)
        )

    @Logger.io
    async def find(self, *, transaction_id: str) -> ProcessorTransaction:
        intent = await self._call(stripe.PaymentIntent.retrieve, transaction_id)
        return ProcessorTransaction(
            transaction_id=intent.id,
            status=PAYMENT_INTENT_STATUS_MAP.get(intent.status, SettlementStatus.FAILED),
        )

    @Logger.io
    async def refund(self, *, transaction_id: str, amount: Decimal) -> ReversalResult:
        try:
            refund = await self._call(
                stripe.Refund.create,
                payment_intent=transaction_id,
                amount=to_minor_units(amount),
            )
        except stripe.CardError as e:
            return ReversalResult(success=False, message=e.user_message or str(e))

        return ReversalResult(
            success=refund.status in SUCCESSFUL_REFUND_STATUSES,
            transaction_id=refund.id,
            created_at=_from_timestamp(refund.created),
            message=refund.status or '',
        )

    @Logger.io
    async def void(self, *, transaction_id: str) -> ReversalResult:
        try:
            intent = await self._call(stripe.PaymentIntent.cancel, transaction_id)
        except stripe.CardError as e:
            return ReversalResult(success=False, message=e.user_message or str(e))

        return ReversalResult(
            success=intent.status == 'canceled',
            transaction_id=intent.id,
            created_at=_from_timestamp(getattr(intent, 'canceled_at', None)),
            message=intent.status or '',
        )
