"""Date utilities."""

from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Union

DAY_KEYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse a YYYY-MM-DD string (or pass through a date); empty values give None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_end(today: date) -> date:
    """Friday of the current week; Saturday and Sunday look back to the past Friday."""
    weekday = today.weekday()
    if weekday <= 4:
        return today + timedelta(days=4 - weekday)
    return today - timedelta(days=weekday - 4)


def period_key(day: date, zoom: str) -> str:
    """Group key for a date at a given zoom level."""
    if zoom == "week":
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if zoom == "month":
        return f"{day.year}-{day.month:02d}"
    if zoom == "quarter":
        return f"{day.year}-Q{(day.month - 1) // 3 + 1}"
    if zoom == "year":
        return str(day.year)
    return day.isoformat()
