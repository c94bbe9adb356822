from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.commerce.app.dto.ticket_view import TicketView
from src.service.commerce.domain.entity.guest_entity import Guest
from src.service.commerce.domain.enum.guest_enum import AdmissionTier, CreatedReason, GuestStatus


class IGuestQueryRepo(ABC):
    @abstractmethod
    async def get_ticket_by_seed(self, *, ticket_seed: str) -> Optional[TicketView]:
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def list_order_tickets(self, *, order_id: UUID) -> List[TicketView]:
        """Non-archived guests of the order with their event."""
        pass

    @abstractmethod
    async def list_customer_active_tickets(self, *, customer_id: UUID) -> List[TicketView]:
        """Non-archived guests of active events across every order of the customer."""
        pass
