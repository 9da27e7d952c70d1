"""Date navigation over the days that have bookmarks.

Dates are ``YYYY-MM-DD`` strings, so lexicographic order is chronological.
Only days that have bookmarks are known; navigation never lands on an
empty day.
"""
import calendar
import re
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import date, timedelta
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Union


DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

UNKNOWN_LABEL = "Unknown date"

# Sunday-first, matching the month grid
WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class DateLabel(NamedTuple):
    short: str
    full: str


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD``; None for anything else."""
    if not value or not DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def add_days(value: str, amount: int) -> Optional[str]:
    """Shift a ``YYYY-MM-DD`` string by whole calendar days."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    try:
        return (parsed + timedelta(days=amount)).isoformat()
    except OverflowError:
        return None


def format_date_label(value: Optional[str]) -> Union[DateLabel, str]:
    """Human label for a group date, e.g. ``Fri, Jan 5, 24``.

    Returns the plain string ``"Unknown date"`` for the unknown group or an
    unparseable value.
    """
    parsed = parse_date(value)
    if parsed is None:
        return UNKNOWN_LABEL
    short = f"{parsed.strftime('%a, %b')} {parsed.day}, {parsed.strftime('%Y')[-2:]}"
    full = f"{parsed.strftime('%A, %B')} {parsed.day}, {parsed.year}"
    return DateLabel(short=short, full=full)


@dataclass(frozen=True)
class CalendarCell:
    """One slot of a month grid. Fillers have no day."""
    day: Optional[int] = None
    date: Optional[str] = None
    enabled: bool = False
    selected: bool = False

    @property
    def is_filler(self) -> bool:
        return self.day is None


@dataclass(frozen=True)
class CalendarMonth:
    """A calendar page and the days in it that have bookmarks."""
    key: str
    year: int
    month_index: int  # 0-based
    label: str
    dates: FrozenSet[str]

    def grid(self, selected: Optional[str] = None) -> List[CalendarCell]:
        """Cells for a 7-column, Sunday-first month grid.

        Leading and trailing fillers pad the month to whole weeks. Only
        days with bookmarks are enabled.
        """
        month = self.month_index + 1
        first_weekday, days_in_month = calendar.monthrange(self.year, month)
        leading = (first_weekday + 1) % 7  # monthrange counts from Monday

        cells = [CalendarCell() for _ in range(leading)]
        for day in range(1, days_in_month + 1):
            date_string = f"{self.year:04d}-{month:02d}-{day:02d}"
            has_data = date_string in self.dates
            cells.append(CalendarCell(
                day=day,
                date=date_string,
                enabled=has_data,
                selected=has_data and date_string == selected,
            ))

        trailing = (7 - len(cells) % 7) % 7
        cells.extend(CalendarCell() for _ in range(trailing))
        return cells


class DateCalendar:
    """Sorted set of the distinct dates that have bookmarks."""

    def __init__(self, dates: Iterable[str]):
        # Non-ISO keys such as "unknown" are not calendar days
        self._dates: List[str] = sorted({d for d in dates if parse_date(d) is not None})

    @property
    def dates(self) -> List[str]:
        return list(self._dates)

    def __len__(self) -> int:
        return len(self._dates)

    def __contains__(self, value: object) -> bool:
        return self._index_of(value) is not None if isinstance(value, str) else False

    def _index_of(self, value: str) -> Optional[int]:
        index = bisect_left(self._dates, value)
        if index < len(self._dates) and self._dates[index] == value:
            return index
        return None

    def on_or_before(self, value: Optional[str]) -> Optional[str]:
        """Last date <= value."""
        if parse_date(value) is None:
            return None
        index = bisect_right(self._dates, value)
        return self._dates[index - 1] if index > 0 else None

    def on_or_after(self, value: Optional[str]) -> Optional[str]:
        """First date >= value."""
        if parse_date(value) is None:
            return None
        index = bisect_left(self._dates, value)
        return self._dates[index] if index < len(self._dates) else None

    def prev_day(self, base: Optional[str]) -> Optional[str]:
        """The date just before ``base`` in the set, not ``base - 1 day``."""
        index = self._index_of(base) if base else None
        if index is None or index == 0:
            return None
        return self._dates[index - 1]

    def next_day(self, base: Optional[str]) -> Optional[str]:
        """The date just after ``base`` in the set, not ``base + 1 day``."""
        index = self._index_of(base) if base else None
        if index is None or index == len(self._dates) - 1:
            return None
        return self._dates[index + 1]

    def prev_week(self, base: Optional[str]) -> Optional[str]:
        """Last date on or before ``base - 7``, else the previous date."""
        if not base:
            return None
        target = add_days(base, -7)
        candidate = self.on_or_before(target) if target else None
        if candidate and candidate != base:
            return candidate
        return self.prev_day(base)

    def next_week(self, base: Optional[str]) -> Optional[str]:
        """First date on or after ``base + 7``, else the next date."""
        if not base:
            return None
        target = add_days(base, 7)
        candidate = self.on_or_after(target) if target else None
        if candidate and candidate != base:
            return candidate
        return self.next_day(base)

    def today(self, today: Optional[date] = None) -> Optional[str]:
        """Today if it has bookmarks, else the nearest later date, else
        the nearest earlier one."""
        if not self._dates:
            return None
        today_string = (today or date.today()).isoformat()
        return self.on_or_after(today_string) or self.on_or_before(today_string)

    def build_months(self) -> List[CalendarMonth]:
        """Group the dates into calendar pages, oldest month first."""
        buckets = {}
        for value in self._dates:
            key = value[:7]
            buckets.setdefault(key, set()).add(value)

        months = []
        for key, dates in buckets.items():
            year, month = int(key[:4]), int(key[5:7])
            months.append(CalendarMonth(
                key=key,
                year=year,
                month_index=month - 1,
                label=date(year, month, 1).strftime("%B %Y"),
                dates=frozenset(dates),
            ))

        months.sort(key=lambda m: (m.year, m.month_index))
        return months
