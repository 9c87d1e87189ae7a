from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.park_ticketing.domain.entity.user_entity import UserEntity
from src.service.park_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    credentials: Optional[HTTPAuthorizationCredentials], cookie_token: Optional[str]
) -> Optional[str]:
    if credentials is not None and credentials.scheme.lower() == 'bearer':
        return credentials.credentials
    return cookie_token


@inject
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    access_token: Optional[str] = Cookie(None),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> UserEntity:
    """Bearer header first, then the access_token cookie (stateless, no DB query)"""
    return jwt_auth.get_current_user_info_from_jwt(_extract_token(credentials, access_token))


@inject
async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    access_token: Optional[str] = Cookie(None),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Optional[UserEntity]:
    """Guests get None. A token that is present but invalid is still rejected."""
    token = _extract_token(credentials, access_token)
    if not token:
        return None
    return jwt_auth.get_current_user_info_from_jwt(token)


async def require_admin(current_user: UserEntity = Depends(get_current_user)) -> UserEntity:
    if not current_user.is_admin:
        raise ForbiddenError('Administrator access required')
    return current_user
