from enum import StrEnum


class ProductType(StrEnum):
    TICKET = 'ticket'
    BUNDLE_TICKET = 'bundle-ticket'
    UPGRADE = 'upgrade'
    ACCOMMODATION = 'accommodation'

    @property
    def issues_guests(self) -> bool:
        return self in (ProductType.TICKET, ProductType.BUNDLE_TICKET)


class ProductStatus(StrEnum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    ARCHIVED = 'archived'


class PromoType(StrEnum):
    SINGLE_USE = 'single-use'
    COUPON = 'coupon'


class PromoStatus(StrEnum):
    ACTIVE = 'active'
    CLAIMED = 'claimed'
    DISABLED = 'disabled'


class EventStatus(StrEnum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
