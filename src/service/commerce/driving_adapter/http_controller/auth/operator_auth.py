"""
Staff authentication

Back-office and door staff call the API with a bearer JWT signed with SECRET_KEY.
The token carries `sub` (operator id, stored as created_by / updated_by) and `role`.
"""

from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Dict, Optional

import attrs
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import NotPermittedError, UnauthorizedError


class OperatorRole(StrEnum):
    ADMIN = 'admin'
    DOORMAN = 'doorman'


@attrs.define(frozen=True)
class Operator:
    id: str
    role: OperatorRole


class JwtOperatorAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_jwt_token(self, operator: Operator) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': operator.id,
            'role': operator.role.value,
            'iat': now,
            'exp': now + timedelta(minutes=self.token_expire_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise UnauthorizedError('Invalid token')

    def get_operator_from_jwt(self, token: Optional[str]) -> Operator:
        if not token:
            raise UnauthorizedError('Not authenticated')

        payload = self.decode_jwt_token(token)
        operator_id = payload.get('sub')
        role = payload.get('role')
        if not operator_id or role not in {r.value for r in OperatorRole}:
            raise UnauthorizedError('Invalid token')

        return Operator(id=str(operator_id), role=OperatorRole(role))


bearer_scheme = HTTPBearer(auto_error=False)
operator_auth = JwtOperatorAuth()


async def get_current_operator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Operator:
    token = credentials.credentials if credentials else None
    return operator_auth.get_operator_from_jwt(token)


async def require_admin(operator: Operator = Depends(get_current_operator)) -> Operator:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_admin',
        attributes={'operator.id': operator.id, 'operator.role': operator.role.value},
    ):
        if operator.role != OperatorRole.ADMIN:
            raise NotPermittedError('Only admins can perform this action')
        return operator


async def require_door_staff(operator: Operator = Depends(get_current_operator)) -> Operator:
    if operator.role not in (OperatorRole.ADMIN, OperatorRole.DOORMAN):
        raise NotPermittedError("You don't have permission to perform this action")
    return operator
