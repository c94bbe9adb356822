from datetime import datetime, timedelta, timezone
from typing import Optional, Self

from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.database.unit_of_work import AbstractUnitOfWork, get_unit_of_work
from src.platform.exception.exceptions import (
    CustomBaseError,
    EventNotActiveError,
    EventNotStartedError,
    GuestAlreadyCheckedInError,
    GuestNotActiveError,
    TicketNotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.commerce_metrics import metrics
from src.service.commerce.app.dto.ticket_view import TicketView
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.guest_enum import GuestStatus


def ensure_guest_can_check_in(ticket: TicketView, *, now: datetime, grace_period: timedelta) -> None:
    """
    Door rules, checked in this order:
    already checked in → guest not active → event not active → event not started
    """
    context = ticket.to_context()
    guest, event = ticket.guest, ticket.event

    if guest.status == GuestStatus.CHECKED_IN:
        raise GuestAlreadyCheckedInError(context)
    if guest.status != GuestStatus.ACTIVE:
        raise GuestNotActiveError(context)
    if not event.is_active:
        raise EventNotActiveError(context)
    if now < event.check_in_opens_at(grace_period=grace_period):
        raise EventNotStartedError(context)


class CheckInWithTicketUseCase:
    """
    Scan a ticket at the door.

    active → checked_in is a conditional update, so when two doors scan the
    same ticket at once exactly one of them wins and the other gets
    GUEST_ALREADY_CHECKED_IN.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.grace_period = timedelta(hours=settings.CHECK_IN_GRACE_PERIOD_HOURS)
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    def depends(cls, uow: AbstractUnitOfWork = Depends(get_unit_of_work)) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, ticket_credential: str, scanned_by: Optional[str] = None) -> Guest:
        with self.tracer.start_as_current_span('use_case.check_in'):
            try:
                guest = await self._check_in(
                    ticket_credential=ticket_credential, scanned_by=scanned_by
                )
            except CustomBaseError as e:
                metrics.record_check_in(result=e.code)
                raise

            metrics.record_check_in(result=GuestStatus.CHECKED_IN.value)
            Logger.base.info(f'🚪 [CHECK-IN] Guest {guest.id} checked in by {scanned_by}')
            return guest

    async def _check_in(self, *, ticket_credential: str, scanned_by: Optional[str]) -> Guest:
        async with self.uow:
            ticket = await self.uow.guest_query_repo.get_ticket_by_seed(
                ticket_seed=ticket_credential
            )
            if ticket is None:
                raise TicketNotFoundError()

            now = datetime.now(timezone.utc)
            ensure_guest_can_check_in(ticket, now=now, grace_period=self.grace_period)

            checked_in = await self.uow.guest_command_repo.check_in_atomically(
                guest_id=ticket.guest.id, scanned_by=scanned_by, check_in_time=now
            )
            if checked_in is None:
                # Lost the race: report what the winner did
                current = await self.uow.guest_command_repo.get_by_id(guest_id=ticket.guest.id)
                if current is not None and current.status != GuestStatus.CHECKED_IN:
                    raise GuestNotActiveError(
                        TicketView(guest=current, event=ticket.event).to_context()
                    )
                raise GuestAlreadyCheckedInError(
                    TicketView(guest=current or ticket.guest, event=ticket.event).to_context()
                )

            await self.uow.commit()
            return checked_in
