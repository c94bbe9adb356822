from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.dto.ticket_view import TicketView
from src.service.commerce.app.interface.i_guest_query_repo import IGuestQueryRepo
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.catalog_enum import EventStatus
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus
from src.service.commerce.driven_adapter.model.event_model import EventModel
from src.service.commerce.driven_adapter.model.guest_model import GuestModel
from src.service.commerce.driven_adapter.model.order_model import OrderModel
from src.service.commerce.driven_adapter.repo._mapper import event_to_entity, guest_to_entity


class GuestQueryRepoImpl(IGuestQueryRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _ticket_query():
        return select(GuestModel, EventModel).join(EventModel, EventModel.id == GuestModel.event_id)

    @staticmethod
    def _to_tickets(rows) -> List[TicketView]:
        return [
            TicketView(guest=guest_to_entity(db_guest), event=event_to_entity(db_event))
            for db_guest, db_event in rows
        ]

    @Logger.io
    async def get_ticket_by_seed(self, *, ticket_seed: str) -> Optional[TicketView]:
        result = await self.session.execute(
            self._ticket_query().where(GuestModel.ticket_seed == ticket_seed)
        )
        tickets = self._to_tickets(result.all())
        return tickets[0] if tickets else None

    @Logger.io
    async def list_guests(
        self,
        *,
        event_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
        admission_tier: Optional[AdmissionTier] = None,
        created_reason: Optional[CreatedReason] = None,
        status: Optional[GuestStatus] = None,
        limit: int = 500,
    ) -> List[Guest]:
        query = select(GuestModel)
        if event_id is not None:
            query = query.where(GuestModel.event_id == event_id)
        if order_id is not None:
            query = query.where(GuestModel.order_id == order_id)
        if admission_tier is not None:
            query = query.where(GuestModel.admission_tier == admission_tier.value)
        if created_reason is not None:
            query = query.where(GuestModel.created_reason == created_reason.value)
        if status is not None:
            query = query.where(GuestModel.status == status.value)
        query = query.order_by(GuestModel.last_name, GuestModel.first_name).limit(limit)

        result = await self.session.execute(query)
        return [guest_to_entity(db_guest) for db_guest in result.scalars().all()]

    @Logger.io
    async def list_order_tickets(self, *, order_id: UUID) -> List[TicketView]:
        result = await self.session.execute(
            self._ticket_query()
            .where(
                GuestModel.order_id == order_id,
                GuestModel.status != GuestStatus.ARCHIVED.value,
            )
            .order_by(GuestModel.created_at, GuestModel.id)
        )
        return self._to_tickets(result.all())

    @Logger.io
    async def list_customer_active_tickets(self, *, customer_id: UUID) -> List[TicketView]:
        result = await self.session.execute(
            self._ticket_query()
            .join(OrderModel, OrderModel.id == GuestModel.order_id)
            .where(
                OrderModel.customer_id == customer_id,
                GuestModel.status != GuestStatus.ARCHIVED.value,
                EventModel.status == EventStatus.ACTIVE.value,
            )
            .order_by(EventModel.date, GuestModel.created_at, GuestModel.id)
        )
        return self._to_tickets(result.all())
