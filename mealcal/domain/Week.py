"""Monday-aligned week derivation and date normalization.

Everything here is a pure function of the anchor date; nothing is cached.
"""
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from mealcal.domain.Errors import InvalidArgument
from mealcal.utilities.constants import ISO_DATE_FORMAT, DAYS_IN_WEEK

DateLike = Union[date, datetime, str]

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: DateLike) -> date:
    """Return ``value`` as a day-granularity ``date``.

    Accepts ``date``, ``datetime`` (time of day is dropped) or a
    ``YYYY-MM-DD`` string. Raises InvalidArgument for anything else.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if _ISO_DATE_PATTERN.match(text):
            try:
                return datetime.strptime(text, ISO_DATE_FORMAT).date()
            except ValueError:
                pass
        raise InvalidArgument(f"Invalid date '{value}' (expected YYYY-MM-DD)", field="date")
    raise InvalidArgument(f"Invalid date {value!r} (expected YYYY-MM-DD)", field="date")


def to_iso(value: DateLike) -> str:
    return parse_date(value).strftime(ISO_DATE_FORMAT)


def week_start_of(anchor: DateLike) -> date:
    """Most recent Monday on or before ``anchor``; Sunday belongs to the week before it."""
    d = parse_date(anchor)
    return d - timedelta(days=d.weekday())


def week_days(week_start: DateLike) -> List[date]:
    start = parse_date(week_start)
    return [start + timedelta(days=i) for i in range(DAYS_IN_WEEK)]


def previous_week(anchor: DateLike) -> date:
    return parse_date(anchor) - timedelta(days=DAYS_IN_WEEK)


def next_week(anchor: DateLike) -> date:
    return parse_date(anchor) + timedelta(days=DAYS_IN_WEEK)


def in_week(value: DateLike, anchor: DateLike) -> bool:
    start = week_start_of(anchor)
    return start <= parse_date(value) < start + timedelta(days=DAYS_IN_WEEK)


class WeekWindow:
    """Derived 7-day view for one anchor. Build a new one instead of mutating."""

    def __init__(self, anchor: DateLike):
        self.anchor = parse_date(anchor)
        self.start = week_start_of(self.anchor)
        self.days = week_days(self.start)
        self.end = self.days[-1]

    def __repr__(self) -> str:
        return f"WeekWindow({self.start.isoformat()}..{self.end.isoformat()})"

    def __contains__(self, value) -> bool:
        return self.start <= parse_date(value) <= self.end

    @property
    def label(self) -> str:
        return f"{self.start.month}/{self.start.day}/{self.start.year} - {self.end.month}/{self.end.day}/{self.end.year}"

    def iso_days(self) -> List[str]:
        return [d.strftime(ISO_DATE_FORMAT) for d in self.days]

    def is_current(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return self.start <= today <= self.end

    def previous(self) -> "WeekWindow":
        return WeekWindow(previous_week(self.start))

    def next(self) -> "WeekWindow":
        return WeekWindow(next_week(self.start))


def week_window(anchor: DateLike) -> WeekWindow:
    return WeekWindow(anchor)


__all__ = [
    "parse_date", "to_iso", "week_start_of", "week_days", "previous_week", "next_week",
    "in_week", "WeekWindow", "week_window",
]
