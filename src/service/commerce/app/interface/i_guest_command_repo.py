"""
Guest Command Repository Interface

Guest writes. Every status transition is conditioned on the guest still being
`active` at write time, so concurrent writers cannot both win.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.guest_enum import AdmissionTier


class IGuestCommandRepo(ABC):
    @abstractmethod
    async def create_many(self, *, guests: List[Guest]) -> List[Guest]:
        pass

    @abstractmethod
    async def get_by_id(self, *, guest_id: UUID) -> Optional[Guest]:
        pass

    @abstractmethod
    async def get_by_order_and_ids(self, *, order_id: UUID, guest_ids: List[UUID]) -> List[Guest]:
        """Guests of the order whose id is in guest_ids (ids of other orders are ignored)."""
        pass

    @abstractmethod
    async def update(self, *, guest: Guest) -> Guest:
        """
        Persist names, tier, meta and updated_by

        Status and check-in time are never written here.
        """
        pass

    @abstractmethod
    async def check_in_atomically(
        self, *, guest_id: UUID, scanned_by: Optional[str], check_in_time: datetime
    ) -> Optional[Guest]:
        """
        UPDATE ... SET status = 'checked_in' WHERE id = :id AND status = 'active' RETURNING

        Returns:
            The checked-in guest, or None when the guest was no longer active
        """
        pass

    @abstractmethod
    async def archive_atomically(self, *, guest_id: UUID, updated_by: Optional[str]) -> Optional[Guest]:
        """Conditional active → archived for one guest, None if not active any more."""
        pass

    @abstractmethod
    async def archive_active_by_order(self, *, order_id: UUID, updated_by: Optional[str]) -> int:
        """Archive every active guest of the order, returns the number archived."""
        pass

    @abstractmethod
    async def archive_active_by_ids(self, *, guest_ids: List[UUID], updated_by: Optional[str]) -> int:
        pass

    @abstractmethod
    async def get_minimum_admission_tier(self, *, guest_id: UUID) -> Optional[AdmissionTier]:
        """
        Highest tier among the ticket products the guest's order bought for the guest's event

        Returns:
            None for guests without an order (comps) or without a matching order item
        """
        pass
