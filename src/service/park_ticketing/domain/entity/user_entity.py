from typing import Optional
from uuid import UUID

import attrs

from src.service.park_ticketing.domain.enum.user_role import UserRole


@attrs.define
class UserEntity:
    """Requester identity decoded from the access token (no user table in this service)"""

    id: UUID
    email: str = ''
    name: str = ''
    role: UserRole = UserRole.VISITOR

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_access(self, owner_id: Optional[UUID]) -> bool:
        return self.is_admin or (owner_id is not None and owner_id == self.id)
