from datetime import datetime, timezone
from uuid import UUID

import jwt

from src.platform.exception.exceptions import UnauthorizedError
from src.platform.logging.loguru_io import Logger
from src.service.commerce.app.interface.i_order_token_service import IOrderTokenService


class JwtOrderTokenServiceImpl(IOrderTokenService):
    ALGORITHM = 'HS256'

    def __init__(self, *, secret: str, issuer: str, audience: str = 'tickets'):
        self.secret = secret
        self.issuer = issuer
        self.audience = audience

    def create(self, *, order_id: UUID) -> str:
        payload = {
            'iss': self.issuer,
            'aud': self.audience,
            'sub': str(order_id),
            'iat': datetime.now(timezone.utc),
        }
        return jwt.encode(payload, self.secret, algorithm=self.ALGORITHM)

    def verify(self, *, token: str) -> UUID:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={'require': ['sub', 'iss', 'aud']},
            )
            return UUID(payload['sub'])
        except (jwt.PyJWTError, ValueError) as e:
            Logger.base.warning(f'🔒 [ORDER-TOKEN] Rejected token: {e}')
            raise UnauthorizedError('Invalid ticket link') from e
