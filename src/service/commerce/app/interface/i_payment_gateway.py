"""
Payment Gateway Interface

Narrow port over an external card processor. The order use cases only ever
see this interface, so adding a processor means adding one adapter.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Mapping

from src.service.commerce.app.dto.payment_dto import (
    ProcessorTransaction,
    ReversalResult,
    SaleResult,
)


class IPaymentGateway(ABC):
    @property
    @abstractmethod
    def processor(self) -> str:
        """Name stored on every Transaction row (e.g. 'stripe')."""
        pass

    @abstractmethod
    async def sale(
        self, *, amount: Decimal, payment_credential: str, metadata: Mapping[str, str]
    ) -> SaleResult:
        """
        Charge and submit for settlement

        A declined card is a SaleResult with success=False. Infrastructure failures
        raise PaymentProcessorError. Callers must never retry a sale on their own.
        """
        pass

    @abstractmethod
    async def find(self, *, transaction_id: str) -> ProcessorTransaction:
        pass

    @abstractmethod
    async def refund(self, *, transaction_id: str, amount: Decimal) -> ReversalResult:
        pass

    @abstractmethod
    async def void(self, *, transaction_id: str) -> ReversalResult:
        pass
