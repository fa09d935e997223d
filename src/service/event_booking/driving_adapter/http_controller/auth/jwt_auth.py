"""
Bearer token verification

Tokens are issued by the auth service; this service only verifies them and
reads the purchaser id from the `user_id` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from uuid import UUID

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError


class JwtAuth:
    def __init__(self, *, secret: Optional[str] = None, algorithm: Optional[str] = None) -> None:
        self.secret = secret or settings.SECRET_KEY.get_secret_value()
        self.algorithm = algorithm or settings.ALGORITHM

    def create_jwt_token(self, *, user_id: UUID, expires_in: timedelta = timedelta(days=7)) -> str:
        """Used by tests and local tooling; production tokens come from the auth service"""
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_id),
            'user_id': str(user_id),
            'iat': now,
            'exp': now + expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError('Token expired')
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_user_id_from_jwt(self, token: Optional[str]) -> UUID:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        user_id = payload.get('user_id')
        if not user_id:
            raise AuthenticationError('Invalid token')

        try:
            return UUID(str(user_id))
        except ValueError:
            raise AuthenticationError('Invalid token')
