from abc import ABC, abstractmethod

from src.service.commerce.app.dto.notification_dto import Receipt, Subscriber, TransferConfirmation


class INotificationDispatcher(ABC):
    """Outbound e-mail and mailing-list sync. Callers never let a failure here fail an order."""

    @abstractmethod
    async def send_receipt(self, *, receipt: Receipt) -> None:
        pass

    @abstractmethod
    async def send_transfer_confirmation(self, *, confirmation: TransferConfirmation) -> None:
        pass

    @abstractmethod
    async def upsert_subscriber(self, *, subscriber: Subscriber) -> None:
        pass
