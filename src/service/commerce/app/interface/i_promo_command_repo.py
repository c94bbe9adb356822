from abc import ABC, abstractmethod
from uuid import UUID


class IPromoCommandRepo(ABC):
    @abstractmethod
    async def claim_single_use(self, *, promo_id: UUID) -> bool:
        """
        Compare-and-set active → claimed

        Returns:
            True for the single caller that performed the transition, False for everyone else
        """
        pass

    @abstractmethod
    async def release_claim(self, *, promo_id: UUID) -> bool:
        """Compare-and-set claimed → active, used when the charge after a claim is declined."""
        pass
