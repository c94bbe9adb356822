from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.notification_dto import Receipt, Subscriber
from src.service.commerce.app.dto.order_result import OrderResult
from src.service.commerce.app.interface.i_notification_dispatcher import INotificationDispatcher


class SendOrderNotificationsUseCase:
    """Receipt e-mail plus mailing-list sync after a purchase. Runs as a background task."""

    def __init__(self, *, notification_dispatcher: INotificationDispatcher) -> None:
        self.notification_dispatcher = notification_dispatcher

    @classmethod
    @inject
    def depends(
        cls,
        notification_dispatcher: INotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
    ) -> Self:
        return cls(notification_dispatcher=notification_dispatcher)

    async def execute(
        self, *, result: OrderResult, order_token: str, marketing_opt_in: bool = False
    ) -> None:
        customer = result.customer

        try:
            await self.notification_dispatcher.send_receipt(
                receipt=Receipt(
                    first_name=customer.first_name,
                    last_name=customer.last_name,
                    email=customer.email,
                    confirmation_id=result.transaction.processor_transaction_id,
                    order_id=result.order.id,
                    order_token=order_token,
                    amount=result.order.amount,
                )
            )
        except Exception as e:
            Logger.base.error(f'📧 [NOTIFY] Receipt for order {result.order.id} failed: {e}')

        tags = [settings.PURCHASER_TAG]
        if marketing_opt_in:
            tags.append(settings.PARTNER_MARKETING_TAG)
        try:
            await self.notification_dispatcher.upsert_subscriber(
                subscriber=Subscriber(
                    list_id=settings.MAILING_LIST_ID,
                    email=customer.email,
                    first_name=customer.first_name,
                    last_name=customer.last_name,
                    tags=tags,
                )
            )
        except Exception as e:
            Logger.base.error(f'📬 [NOTIFY] Mailing list sync for {customer.email} failed: {e}')
