from uuid import UUID

from sqlalchemy import update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_promo_command_repo import IPromoCommandRepo
from src.service.commerce.domain.enum.catalog_enum import PromoStatus, PromoType
from src.service.commerce.driven_adapter.model.promo_model import PromoModel


class PromoCommandRepoImpl(IPromoCommandRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    async def _transition(self, *, promo_id: UUID, source: PromoStatus, target: PromoStatus) -> bool:
        stmt = (
            sql_update(PromoModel)
            .where(
                PromoModel.id == promo_id,
                PromoModel.type == PromoType.SINGLE_USE.value,
                PromoModel.status == source.value,
            )
            .values(status=target.value)
            .returning(PromoModel.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @Logger.io
    async def claim_single_use(self, *, promo_id: UUID) -> bool:
        return await self._transition(
            promo_id=promo_id, source=PromoStatus.ACTIVE, target=PromoStatus.CLAIMED
        )

    @Logger.io
    async def release_claim(self, *, promo_id: UUID) -> bool:
        return await self._transition(
            promo_id=promo_id, source=PromoStatus.CLAIMED, target=PromoStatus.ACTIVE
        )
