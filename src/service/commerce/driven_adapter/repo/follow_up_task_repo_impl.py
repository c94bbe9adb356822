from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select, update as sql_update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_follow_up_task_repo import IFollowUpTaskRepo
from src.service.commerce.domain.entity.follow_up_task_entity import FollowUpTask
from src.service.commerce.domain.enum.payment_enum import FollowUpTaskKind, FollowUpTaskStatus
from src.service.commerce.driven_adapter.model.follow_up_task_model import FollowUpTaskModel


class FollowUpTaskRepoImpl(IFollowUpTaskRepo):
    def __init__(self, *, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_entity(db_task: FollowUpTaskModel) -> FollowUpTask:
        return FollowUpTask(
            id=db_task.id,
            order_id=db_task.order_id,
            kind=FollowUpTaskKind(db_task.kind),
            payload=db_task.payload or {},
            status=FollowUpTaskStatus(db_task.status),
            attempts=db_task.attempts,
            last_error=db_task.last_error,
            created_at=db_task.created_at,
            updated_at=db_task.updated_at,
        )

    @staticmethod
    def _runnable_query(*, max_attempts: int):
        return select(FollowUpTaskModel).where(
            or_(
                FollowUpTaskModel.status == FollowUpTaskStatus.PENDING.value,
                (FollowUpTaskModel.status == FollowUpTaskStatus.FAILED.value)
                & (FollowUpTaskModel.attempts < max_attempts),
            )
        )

    @Logger.io
    async def add_many(self, *, tasks: List[FollowUpTask]) -> None:
        if not tasks:
            return
        await self.session.execute(
            insert(FollowUpTaskModel).values(
                [
                    {
                        'id': task.id,
                        'order_id': task.order_id,
                        'kind': task.kind.value,
                        'payload': task.payload,
                        'status': task.status.value,
                        'attempts': task.attempts,
                    }
                    for task in tasks
                ]
            )
        )

    @Logger.io
    async def list_runnable(
        self, *, order_id: Optional[UUID] = None, max_attempts: int, limit: int = 100
    ) -> List[FollowUpTask]:
        query = self._runnable_query(max_attempts=max_attempts)
        if order_id is not None:
            query = query.where(FollowUpTaskModel.order_id == order_id)
        query = query.order_by(FollowUpTaskModel.created_at, FollowUpTaskModel.id).limit(limit)
        result = await self.session.execute(query)
        return [self._to_entity(db_task) for db_task in result.scalars().all()]

    @Logger.io
    async def save(self, *, task: FollowUpTask) -> None:
        await self.session.execute(
            sql_update(FollowUpTaskModel)
            .where(FollowUpTaskModel.id == task.id)
            .values(
                status=task.status.value,
                attempts=task.attempts,
                last_error=task.last_error,
                updated_at=task.updated_at,
            )
        )

    # SKIP LOCKED: two processors never run the same task
    @Logger.io
    async def get_runnable(self, *, task_id: UUID, max_attempts: int) -> Optional[FollowUpTask]:
        result = await self.session.execute(
            self._runnable_query(max_attempts=max_attempts)
            .where(FollowUpTaskModel.id == task_id)
            .with_for_update(skip_locked=True)
        )
        db_task = result.scalar_one_or_none()
        return self._to_entity(db_task) if db_task else None
