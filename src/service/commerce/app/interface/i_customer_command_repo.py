from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.commerce.domain.entity.customer_entity import Customer


class ICustomerCommandRepo(ABC):
    @abstractmethod
    async def upsert_by_email(self, *, customer: Customer) -> Customer:
        """
        Insert the customer, or refresh the names of the existing customer with the same email

        Args:
            customer: Customer with a normalized email

        Returns:
            The stored customer (its id is the existing one on conflict)
        """
        pass

    @abstractmethod
    async def get_by_id(self, *, customer_id: UUID) -> Optional[Customer]:
        pass
