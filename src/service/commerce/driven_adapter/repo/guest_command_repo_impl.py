from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update as sql_update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_guest_command_repo import IGuestCommandRepo
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.catalog_enum import ProductType
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, GuestStatus
from src.service.commerce.driven_adapter.model.guest_model import GuestModel
from src.service.commerce.driven_adapter.model.order_model import OrderItemModel
from src.service.commerce.driven_adapter.model.product_model import ProductModel
from src.service.commerce.driven_adapter.repo._mapper import guest_to_entity


class GuestCommandRepoImpl(IGuestCommandRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @Logger.io
    async def create_many(self, *, guests: List[Guest]) -> List[Guest]:
        if not guests:
            return []
        result = await self.session.execute(
            insert(GuestModel)
            .values(
                [
                    {
                        'id': guest.id,
                        'first_name': guest.first_name,
                        'last_name': guest.last_name,
                        'admission_tier': guest.admission_tier.value,
                        'order_id': guest.order_id,
                        'event_id': guest.event_id,
                        'created_by': guest.created_by,
                        'updated_by': guest.updated_by,
                        'created_reason': guest.created_reason.value,
                        'ticket_seed': guest.ticket_seed,
                        'status': guest.status.value,
                        'check_in_time': guest.check_in_time,
                        'meta': guest.meta,
                    }
                    for guest in guests
                ]
            )
            .returning(GuestModel)
        )
        return [guest_to_entity(db_guest) for db_guest in result.scalars().all()]

    @Logger.io
    async def get_by_id(self, *, guest_id: UUID) -> Optional[Guest]:
        result = await self.session.execute(select(GuestModel).where(GuestModel.id == guest_id))
        db_guest = result.scalar_one_or_none()
        return guest_to_entity(db_guest) if db_guest else None

    @Logger.io
    async def get_by_order_and_ids(self, *, order_id: UUID, guest_ids: List[UUID]) -> List[Guest]:
        if not guest_ids:
            return []
        result = await self.session.execute(
            select(GuestModel)
            .where(GuestModel.order_id == order_id, GuestModel.id.in_(guest_ids))
            .order_by(GuestModel.id)
            .with_for_update()
        )
        return [guest_to_entity(db_guest) for db_guest in result.scalars().all()]

    @Logger.io
    async def update(self, *, guest: Guest) -> Guest:
        result = await self.session.execute(
            sql_update(GuestModel)
            .where(GuestModel.id == guest.id)
            .values(
                first_name=guest.first_name,
                last_name=guest.last_name,
                admission_tier=guest.admission_tier.value,
                meta=guest.meta,
                updated_by=guest.updated_by,
                updated_at=func.now(),
            )
            .returning(GuestModel)
        )
        db_guest = result.scalar_one_or_none()
        if db_guest is None:
            raise ValueError(f'Guest with id {guest.id} not found')
        return guest_to_entity(db_guest)

    @Logger.io
    async def check_in_atomically(
        self, *, guest_id: UUID, scanned_by: Optional[str], check_in_time: datetime
    ) -> Optional[Guest]:
        result = await self.session.execute(
            sql_update(GuestModel)
            .where(GuestModel.id == guest_id, GuestModel.status == GuestStatus.ACTIVE.value)
            .values(
                status=GuestStatus.CHECKED_IN.value,
                check_in_time=check_in_time,
                updated_by=scanned_by,
                updated_at=func.now(),
            )
            .returning(GuestModel)
        )
        db_guest = result.scalar_one_or_none()
        return guest_to_entity(db_guest) if db_guest else None

    @Logger.io
    async def archive_atomically(
        self, *, guest_id: UUID, updated_by: Optional[str]
    ) -> Optional[Guest]:
        result = await self.session.execute(
            sql_update(GuestModel)
            .where(GuestModel.id == guest_id, GuestModel.status == GuestStatus.ACTIVE.value)
            .values(status=GuestStatus.ARCHIVED.value, updated_by=updated_by, updated_at=func.now())
            .returning(GuestModel)
        )
        db_guest = result.scalar_one_or_none()
        return guest_to_entity(db_guest) if db_guest else None

    @Logger.io
    async def archive_active_by_order(self, *, order_id: UUID, updated_by: Optional[str]) -> int:
        result = await self.session.execute(
            sql_update(GuestModel)
            .where(GuestModel.order_id == order_id, GuestModel.status == GuestStatus.ACTIVE.value)
            .values(status=GuestStatus.ARCHIVED.value, updated_by=updated_by, updated_at=func.now())
            .returning(GuestModel.id)
        )
        return len(result.scalars().all())

    @Logger.io
    async def archive_active_by_ids(
        self, *, guest_ids: List[UUID], updated_by: Optional[str]
    ) -> int:
        if not guest_ids:
            return 0
        result = await self.session.execute(
            sql_update(GuestModel)
            .where(GuestModel.id.in_(guest_ids), GuestModel.status == GuestStatus.ACTIVE.value)
            .values(status=GuestStatus.ARCHIVED.value, updated_by=updated_by, updated_at=func.now())
            .returning(GuestModel.id)
        )
        return len(result.scalars().all())

    @Logger.io
    async def get_minimum_admission_tier(self, *, guest_id: UUID) -> Optional[AdmissionTier]:
        stmt = (
            select(ProductModel.admission_tier)
            .select_from(GuestModel)
            .join(OrderItemModel, OrderItemModel.order_id == GuestModel.order_id)
            .join(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .where(
                GuestModel.id == guest_id,
                ProductModel.event_id == GuestModel.event_id,
                ProductModel.type.in_([t.value for t in ProductType if t.issues_guests]),
                ProductModel.admission_tier.is_not(None),
            )
        )
        tiers = [AdmissionTier(tier) for tier in (await self.session.execute(stmt)).scalars()]
        if not tiers:
            return None
        return max(tiers, key=lambda tier: tier.rank)
