# kushalwear/domain/order_numbers.py
import re
from datetime import datetime, time, timedelta, timezone

ORDER_NUMBER_PREFIX = "KW"
ORDER_NUMBER_RE = re.compile(r"^KW\d{6}\d{4,}$")
FALLBACK_NUMBER_RE = re.compile(r"^KW\d{8}$")


def format_order_number(day: datetime, sequence: int) -> str:
    """KW + RRMMDD + numer kolejny w dniu (min. 4 cyfry)."""
    return f"{ORDER_NUMBER_PREFIX}{day:%y%m%d}{sequence:04d}"


def fallback_order_number(now: datetime, bump: int = 0) -> str:
    """KW + ostatnie 8 cyfr znacznika czasu w milisekundach."""
    millis = int(now.timestamp() * 1000) + bump
    return f"{ORDER_NUMBER_PREFIX}{str(millis)[-8:]}"


def local_day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """
    Granice "dzisiaj" od lokalnej polnocy do polnocy, zwracane w UTC
    (created_at w bazie jest w UTC).
    """
    local_now = now.astimezone()
    start = datetime.combine(local_now.date(), time.min, tzinfo=local_now.tzinfo)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
