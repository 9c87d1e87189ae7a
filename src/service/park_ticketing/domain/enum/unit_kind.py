from enum import StrEnum


class UnitKind(StrEnum):
    """Discriminant of the bookable unit tagged union"""

    EVENT = 'event'
    GAME = 'game'
