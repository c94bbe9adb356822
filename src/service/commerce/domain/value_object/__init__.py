"""Commerce Domain Value Objects"""

from src.service.commerce.domain.value_object.cart import CartLine, PricedCart, PricedLine
from src.service.commerce.domain.value_object.customer_info import CustomerInfo
from src.service.commerce.domain.value_object.guest_update import (
    ChangeAdmissionTier,
    GuestUpdate,
    RenameGuest,
    ReplaceGuestMeta,
)

__all__ = [
    'CartLine',
    'ChangeAdmissionTier',
    'CustomerInfo',
    'GuestUpdate',
    'PricedCart',
    'PricedLine',
    'RenameGuest',
    'ReplaceGuestMeta',
]
