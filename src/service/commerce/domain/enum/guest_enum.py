from enum import StrEnum


class GuestStatus(StrEnum):
    """
    active ──► checked_in   (terminal)
       └─────► archived     (terminal)
    """

    ACTIVE = 'active'
    CHECKED_IN = 'checked_in'
    ARCHIVED = 'archived'


class CreatedReason(StrEnum):
    PURCHASE = 'purchase'
    COMP = 'comp'
    TRANSFER = 'transfer'


class AdmissionTier(StrEnum):
    GENERAL = 'general'
    VIP = 'vip'
    SPONSOR = 'sponsor'
    STACHEPASS = 'stachepass'

    @property
    def rank(self) -> int:
        # Every premium tier outranks general; premium tiers are peers
        return 0 if self is AdmissionTier.GENERAL else 1
