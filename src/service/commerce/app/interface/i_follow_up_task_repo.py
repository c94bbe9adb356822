from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.commerce.domain.entity.follow_up_task_entity import FollowUpTask


class IFollowUpTaskRepo(ABC):
    @abstractmethod
    async def add_many(self, *, tasks: List[FollowUpTask]) -> None:
        pass

    @abstractmethod
    async def list_runnable(
        self, *, order_id: Optional[UUID] = None, max_attempts: int, limit: int = 100
    ) -> List[FollowUpTask]:
        """Pending tasks plus failed tasks that still have attempts left, oldest first."""
        pass

    @abstractmethod
    async def save(self, *, task: FollowUpTask) -> None:
        pass

    @abstractmethod
    async def get_runnable(self, *, task_id: UUID, max_attempts: int) -> Optional[FollowUpTask]:
        """
        Lock one task for processing in the current transaction

        Returns:
            None when the task is done, out of attempts or locked by another processor
        """
        pass
