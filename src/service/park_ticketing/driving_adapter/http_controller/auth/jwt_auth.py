"""
Access token decoding

Tokens are issued by the park's identity service; this service only decodes
them. create_jwt_token mirrors the issuer's claim layout.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from uuid import UUID

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.domain.enum.user_role import UserRole


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user_entity.id),
            'exp': now + timedelta(minutes=self.token_expire_minutes),
            'iat': now,
            'email': user_entity.email,
            'name': user_entity.name,
            'role': user_entity.role.value,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError('Token has expired')
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)

        # Rebuild UserEntity from JWT payload (no DB query)
        try:
            return UserEntity(
                id=UUID(str(payload['sub'])),
                email=payload.get('email') or '',
                name=payload.get('name') or '',
                role=UserRole(payload.get('role') or UserRole.VISITOR),
            )
        except (KeyError, ValueError):
            raise AuthenticationError('Invalid token')
