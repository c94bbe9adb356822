from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.notification_dto import Subscriber, TransferConfirmation
from src.service.commerce.app.dto.order_result import TransferResult
from src.service.commerce.app.interface.i_notification_dispatcher import INotificationDispatcher


class SendTransferNotificationsUseCase:
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

    async def execute(self, *, result: TransferResult, order_token: str) -> None:
        transferee = result.transferee
        parent_order_id = result.order.parent_order_id or result.order.id

        try:
            await self.notification_dispatcher.send_transfer_confirmation(
                confirmation=TransferConfirmation(
                    transferee_first_name=transferee.first_name,
                    transferee_last_name=transferee.last_name,
                    email=transferee.email,
                    order_id=result.order.id,
                    parent_order_id=parent_order_id,
                    order_token=order_token,
                    guest_count=result.guest_count,
                )
            )
        except Exception as e:
            Logger.base.error(
                f'📧 [NOTIFY] Transfer confirmation for order {result.order.id} failed: {e}'
            )

        try:
            await self.notification_dispatcher.upsert_subscriber(
                subscriber=Subscriber(
                    list_id=settings.MAILING_LIST_ID,
                    email=transferee.email,
                    first_name=transferee.first_name,
                    last_name=transferee.last_name,
                    tags=[settings.TRANSFEREE_TAG],
                )
            )
        except Exception as e:
            Logger.base.error(f'📬 [NOTIFY] Mailing list sync for {transferee.email} failed: {e}')
