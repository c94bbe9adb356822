from abc import ABC, abstractmethod
from uuid import UUID


class IOrderTokenService(ABC):
    """Signed token that lets a customer open the ticket page of an order without logging in."""

    @abstractmethod
    def create(self, *, order_id: UUID) -> str:
        pass

    @abstractmethod
    def verify(self, *, token: str) -> UUID:
        """
        Returns:
            The order id carried by the token

        Raises:
            UnauthorizedError: expired, tampered or foreign token
        """
        pass
