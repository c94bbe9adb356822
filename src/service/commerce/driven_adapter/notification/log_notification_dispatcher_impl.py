"""Notification dispatcher that writes e-mails and list updates to the log instead of sending them."""

from datetime import datetime, timezone
from typing import List

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.notification_dto import Receipt, Subscriber, TransferConfirmation
from src.service.commerce.app.interface.i_notification_dispatcher import INotificationDispatcher


class LogNotificationDispatcherImpl(INotificationDispatcher):
    def __init__(self, *, ticket_page_url: str = '/my-tickets'):
        self.ticket_page_url = ticket_page_url
        self.sent_emails: List[dict] = []  # Store sent emails for testing
        self.subscribers: List[Subscriber] = []

    def _ticket_link(self, order_token: str) -> str:
        return f'{self.ticket_page_url}?t={order_token}'

    async def _send_email(self, *, to: str, subject: str, body: str) -> None:
        email_data = {
            'to': to,
            'subject': subject,
            'body': body,
            'sent_at': datetime.now(timezone.utc),
        }
        self.sent_emails.append(email_data)
        Logger.base.info(f'📧 [MAIL] To: {to} | Subject: {subject}')

    @Logger.io
    async def send_receipt(self, *, receipt: Receipt) -> None:
        body = f"""
        Hi {receipt.first_name},

        Thank you for your order!

        Confirmation: {receipt.confirmation_id}
        Total: ${receipt.amount:.2f}

        Your tickets: {self._ticket_link(receipt.order_token)}
        """
        await self._send_email(
            to=receipt.email,
            subject=f'Your order {receipt.confirmation_id}',
            body=body.strip(),
        )

    @Logger.io
    async def send_transfer_confirmation(self, *, confirmation: TransferConfirmation) -> None:
        tickets = 'ticket' if confirmation.guest_count == 1 else 'tickets'
        body = f"""
        Hi {confirmation.transferee_first_name},

        {confirmation.guest_count} {tickets} have been transferred to you.

        Your tickets: {self._ticket_link(confirmation.order_token)}
        """
        await self._send_email(
            to=confirmation.email,
            subject='Tickets transferred to you',
            body=body.strip(),
        )

    @Logger.io
    async def upsert_subscriber(self, *, subscriber: Subscriber) -> None:
        self.subscribers = [
            existing
            for existing in self.subscribers
            if (existing.list_id, existing.email) != (subscriber.list_id, subscriber.email)
        ]
        self.subscribers.append(subscriber)
        Logger.base.info(
            f'📬 [MAILING-LIST] {subscriber.email} → {subscriber.list_id} '
            f'tags={",".join(subscriber.tags)}'
        )
