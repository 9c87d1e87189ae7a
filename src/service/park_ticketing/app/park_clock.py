from datetime import date, datetime
from zoneinfo import ZoneInfo

from src.platform.config.core_setting import settings


def park_today() -> date:
    """Calendar date at the park, which decides whether an event is in the past"""
    return datetime.now(ZoneInfo(settings.PARK_TIMEZONE)).date()
