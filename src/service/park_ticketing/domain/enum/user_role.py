from enum import StrEnum


class UserRole(StrEnum):
    VISITOR = 'visitor'
    ADMIN = 'admin'
