"""
Unit of Work Pattern - one database session shared by every repository of a use case

- UoW owns the session lifecycle and commit/rollback
- Repositories receive the shared session from the UoW
- Leaving the `async with` block without commit rolls back
"""

from __future__ import annotations

import abc
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.orm_db_setting import (
    Database,
    get_async_read_session,
    get_async_session,
)


if TYPE_CHECKING:
    from src.service.commerce.app.interface.i_catalog_query_repo import ICatalogQueryRepo
    from src.service.commerce.app.interface.i_customer_command_repo import (
        ICustomerCommandRepo,
    )
    from src.service.commerce.app.interface.i_follow_up_task_repo import IFollowUpTaskRepo
    from src.service.commerce.app.interface.i_guest_command_repo import IGuestCommandRepo
    from src.service.commerce.app.interface.i_guest_query_repo import IGuestQueryRepo
    from src.service.commerce.app.interface.i_inventory_command_repo import (
        IInventoryCommandRepo,
    )
    from src.service.commerce.app.interface.i_order_command_repo import IOrderCommandRepo
    from src.service.commerce.app.interface.i_order_query_repo import IOrderQueryRepo
    from src.service.commerce.app.interface.i_promo_command_repo import IPromoCommandRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            await uow.order_command_repo.create_paid_order(...)
            await uow.follow_up_task_repo.add_many(...)
            await uow.commit()
    """

    catalog_query_repo: ICatalogQueryRepo
    customer_command_repo: ICustomerCommandRepo
    promo_command_repo: IPromoCommandRepo
    order_command_repo: IOrderCommandRepo
    order_query_repo: IOrderQueryRepo
    guest_command_repo: IGuestCommandRepo
    guest_query_repo: IGuestQueryRepo
    inventory_command_repo: IInventoryCommandRepo
    follow_up_task_repo: IFollowUpTaskRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.commerce.driven_adapter.repo.catalog_query_repo_impl import (
            CatalogQueryRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.customer_command_repo_impl import (
            CustomerCommandRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.follow_up_task_repo_impl import (
            FollowUpTaskRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.guest_command_repo_impl import (
            GuestCommandRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.guest_query_repo_impl import (
            GuestQueryRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.inventory_command_repo_impl import (
            InventoryCommandRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.order_command_repo_impl import (
            OrderCommandRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.order_query_repo_impl import (
            OrderQueryRepoImpl,
        )
        from src.service.commerce.driven_adapter.repo.promo_command_repo_impl import (
            PromoCommandRepoImpl,
        )

        self.catalog_query_repo = CatalogQueryRepoImpl(session=self.session)
        self.customer_command_repo = CustomerCommandRepoImpl(session=self.session)
        self.promo_command_repo = PromoCommandRepoImpl(session=self.session)
        self.order_command_repo = OrderCommandRepoImpl(session=self.session)
        self.order_query_repo = OrderQueryRepoImpl(session=self.session)
        self.guest_command_repo = GuestCommandRepoImpl(session=self.session)
        self.guest_query_repo = GuestQueryRepoImpl(session=self.session)
        self.inventory_command_repo = InventoryCommandRepoImpl(session=self.session)
        self.follow_up_task_repo = FollowUpTaskRepoImpl(session=self.session)

        return await super().__aenter__()

    async def _commit(self):
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


class UnitOfWorkFactory:
    """
    Opens its own session, for work that outlives the request (background tasks)

    Usage:
        async with uow_factory() as uow:
            ...
            await uow.commit()
    """

    def __init__(self, *, database: Database) -> None:
        self.database = database

    @asynccontextmanager
    async def __call__(self) -> AsyncIterator[AbstractUnitOfWork]:
        async with self.database.session() as session:
            async with SqlAlchemyUnitOfWork(session) as uow:
                yield uow


def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """FastAPI dependency: UoW bound to the request session."""
    return SqlAlchemyUnitOfWork(session)


def get_read_unit_of_work(
    session: AsyncSession = Depends(get_async_read_session),
) -> AbstractUnitOfWork:
    """FastAPI dependency: UoW on the read replica, for query use cases (never commits)."""
    return SqlAlchemyUnitOfWork(session)
