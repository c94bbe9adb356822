from datetime import datetime, timezone
import re
from typing import Any, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidError


EMAIL_PATTERN = re.compile(r'.+@.+\..{2,}')


@attrs.define
class Customer:
    id: UUID
    first_name: str
    last_name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    meta: dict[str, Any] = attrs.field(factory=dict)

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @classmethod
    def create(cls, *, first_name: str, last_name: str, email: str) -> 'Customer':
        first_name = (first_name or '').strip()
        last_name = (last_name or '').strip()
        normalized_email = cls.normalize_email(email or '')

        if not first_name or not last_name or not normalized_email:
            raise InvalidError('Missing customer data')
        if not EMAIL_PATTERN.fullmatch(normalized_email):
            raise InvalidError('Invalid email address')

        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            first_name=first_name,
            last_name=last_name,
            email=normalized_email,
            created_at=now,
            updated_at=now,
        )
