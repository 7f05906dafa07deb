from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from ..core.exceptions import ValidationError


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easier.
    """
    return datetime.now()


def day_window(reference: datetime) -> Tuple[datetime, datetime]:
    """Return [midnight, next midnight) of the calendar day containing `reference`."""
    start = datetime.combine(reference.date(), time.min)
    return start, start + timedelta(days=1)


def month_window(year: int, month: int) -> Tuple[datetime, datetime]:
    start = datetime(int(year), int(month), 1)
    if start.month == 12:
        end = datetime(start.year + 1, 1, 1)
    else:
        end = datetime(start.year, start.month + 1, 1)
    return start, end


def week_days(reference: date) -> list[date]:
    """Monday..Sunday of the week containing `reference`."""
    monday = reference - timedelta(days=reference.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    total = value.month - 1 + int(months)
    year = value.year + total // 12
    month = total % 12 + 1
    day = min(value.day, days_in_month(year, month))
    return value.replace(year=year, month=month, day=day)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return parse_iso_date(str(value)[:10])


def parse_month(value: str) -> Tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    try:
        parsed = datetime.strptime((value or "").strip(), "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return parsed.year, parsed.month


def format_hour(hour_value: float) -> str:
    """Render a fractional hour as H:MM (minutes floored)."""
    hours = int(hour_value)
    minutes = int((hour_value - hours) * 60)
    return f"{hours}:{minutes:02d}"
