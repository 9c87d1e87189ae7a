from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.park_ticketing.domain.enum.user_role import UserRole
from src.service.park_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@pytest.mark.unit
class TestJwtAuth:
    def test_round_trip(self, admin):
        jwt_auth = JwtAuth()

        user = jwt_auth.get_current_user_info_from_jwt(jwt_auth.create_jwt_token(admin))

        assert user.id == admin.id
        assert user.role == UserRole.ADMIN
        assert user.is_admin is True

    def test_missing_token(self):
        with pytest.raises(AuthenticationError, match='Not authenticated'):
            JwtAuth().get_current_user_info_from_jwt(None)

    def test_token_signed_with_another_key(self, visitor):
        token = jwt.encode({'sub': str(visitor.id), 'role': 'visitor'}, 'other-key', algorithm='HS256')

        with pytest.raises(AuthenticationError, match='Invalid token'):
            JwtAuth().get_current_user_info_from_jwt(token)

    def test_expired_token(self, visitor):
        token = jwt.encode(
            {
                'sub': str(visitor.id),
                'role': 'visitor',
                'exp': datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(AuthenticationError, match='expired'):
            JwtAuth().get_current_user_info_from_jwt(token)

    def test_subject_must_be_a_uuid(self):
        token = jwt.encode(
            {'sub': '42', 'role': 'visitor'},
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(AuthenticationError):
            JwtAuth().get_current_user_info_from_jwt(token)
