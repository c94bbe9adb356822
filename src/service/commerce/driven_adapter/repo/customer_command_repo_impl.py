from typing import Optional
from uuid import UUID

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_customer_command_repo import ICustomerCommandRepo
from src.service.commerce.domain.entity.customer_entity import Customer
from src.service.commerce.driven_adapter.model.customer_model import CustomerModel
from src.service.commerce.driven_adapter.repo._mapper import customer_to_entity


class CustomerCommandRepoImpl(ICustomerCommandRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @Logger.io
    async def upsert_by_email(self, *, customer: Customer) -> Customer:
        stmt = insert(CustomerModel).values(
            id=customer.id,
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            meta=customer.meta,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CustomerModel.email],
            set_={
                'first_name': stmt.excluded.first_name,
                'last_name': stmt.excluded.last_name,
                'updated_at': func.now(),
            },
        ).returning(CustomerModel)

        result = await self.session.execute(stmt)
        return customer_to_entity(result.scalar_one())

    @Logger.io
    async def get_by_id(self, *, customer_id: UUID) -> Optional[Customer]:
        db_customer = await self.session.get(CustomerModel, customer_id)
        return customer_to_entity(db_customer) if db_customer else None
