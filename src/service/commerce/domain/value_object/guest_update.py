"""
Closed set of partial updates a guest accepts.

Status is deliberately absent: guests leave `active` only through check-in,
refund, transfer or archive.
"""

from typing import Any, Union

import attrs

from src.service.commerce.domain.enum.guest_enum import AdmissionTier


@attrs.define(frozen=True)
class RenameGuest:
    first_name: str
    last_name: str


@attrs.define(frozen=True)
class ChangeAdmissionTier:
    admission_tier: AdmissionTier


@attrs.define(frozen=True)
class ReplaceGuestMeta:
    meta: dict[str, Any]


GuestUpdate = Union[RenameGuest, ChangeAdmissionTier, ReplaceGuestMeta]
