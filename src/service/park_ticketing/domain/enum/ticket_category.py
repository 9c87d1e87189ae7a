from enum import StrEnum


class TicketCategory(StrEnum):
    ADULT = 'adult'
    CHILD = 'child'
    SENIOR = 'senior'
    STUDENT = 'student'
    GROUP = 'group'
    STANDARD = 'standard'
    PREMIUM = 'premium'
