"""Viewer session: navigation and search state for one loaded payload.

A session is built from a single WatchedResponse and discarded on reload.
It owns the selected date, the calendar page and the status line; the
date calendar and search index it wraps are read-only.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

from watched_bookmarks.date_calendar import (
    WEEKDAY_HEADERS,
    CalendarCell,
    CalendarMonth,
    DateCalendar,
    DateLabel,
    format_date_label,
)
from watched_bookmarks.grouping import DateGroup, WatchedResponse, format_instant
from watched_bookmarks.search import MAX_RESULTS, SearchIndex, SearchResult


PREVIOUS = "previous"
NEXT = "next"

NEAR_TODAY_MESSAGE = "No bookmarks available near today."
NO_EARLIER_MESSAGE = "No earlier bookmarks available."
NO_LATER_MESSAGE = "No later bookmarks available."


class ViewerSession:
    """Navigation state over one immutable WatchedResponse."""

    def __init__(self, response: WatchedResponse, today: Optional[date] = None):
        self.response = response
        self._today = today
        self.groups_by_date: Dict[str, DateGroup] = {group.date: group for group in response.groups}
        self.calendar = DateCalendar(self.groups_by_date)
        self.months: List[CalendarMonth] = self.calendar.build_months()
        self.search_index = SearchIndex(response.groups)

        self.selected_date = ""
        self.month_index = 0
        self.status = self.summary()

        dates = self.calendar.dates
        if dates:
            self.select_date(dates[-1])

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], today: Optional[date] = None) -> "ViewerSession":
        """Build a session from the JSON payload of the query API."""
        return cls(WatchedResponse.from_dict(payload), today=today)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def summary(self) -> str:
        parts = [f"{self.response.total_count} total bookmarks"]
        if self.response.source_path:
            parts.append(f"Source: {self.response.source_path}")
        parts.append(f"Synced {format_instant(self.response.updated_at)}")
        return " • ".join(parts)

    @property
    def available_dates(self) -> List[str]:
        return self.calendar.dates

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def base_date(self) -> Optional[str]:
        """The selected date if it has bookmarks, else the oldest date."""
        if not len(self.calendar):
            return None
        if self.selected_date and self.selected_date in self.calendar:
            return self.selected_date
        return self.calendar.dates[0]

    def selected_label(self) -> Union[DateLabel, str]:
        """Text for the date button, or "Unknown date" with no selection."""
        return format_date_label(self.selected_date)

    def select_date(self, value: str) -> None:
        """Select ``value`` and turn the calendar to its month."""
        self.selected_date = value
        if value:
            month_key = value[:7]
            for index, month in enumerate(self.months):
                if month.key == month_key:
                    self.month_index = index
                    break

    def jump_to_date(self, value: str) -> Optional[DateGroup]:
        """Return the group for ``value``, or None with a status message."""
        if not value:
            return None
        group = self.groups_by_date.get(value) if value in self.calendar else None
        if group is None:
            self.status = f"No bookmarks found for {value}."
            return None
        self.status = self.summary()
        return group

    def _jump(self, target: Optional[str], message: str) -> Optional[DateGroup]:
        if not target:
            self.status = message
            return None
        self.select_date(target)
        return self.jump_to_date(target)

    def today_target(self) -> Optional[str]:
        return self.calendar.today(self._today)

    def day_target(self, direction: str) -> Optional[str]:
        base = self.base_date()
        if direction == PREVIOUS:
            return self.calendar.prev_day(base)
        return self.calendar.next_day(base)

    def week_target(self, direction: str) -> Optional[str]:
        base = self.base_date()
        if direction == PREVIOUS:
            return self.calendar.prev_week(base)
        return self.calendar.next_week(base)

    def jump_today(self) -> Optional[DateGroup]:
        return self._jump(self.today_target(), NEAR_TODAY_MESSAGE)

    def jump_day(self, direction: str) -> Optional[DateGroup]:
        message = NO_EARLIER_MESSAGE if direction == PREVIOUS else NO_LATER_MESSAGE
        return self._jump(self.day_target(direction), message)

    def jump_week(self, direction: str) -> Optional[DateGroup]:
        message = NO_EARLIER_MESSAGE if direction == PREVIOUS else NO_LATER_MESSAGE
        return self._jump(self.week_target(direction), message)

    def quick_jump_state(self) -> Dict[str, bool]:
        """Which quick-jump controls currently have somewhere to go."""
        return {
            "today": self.today_target() is not None,
            "prev_day": self.day_target(PREVIOUS) is not None,
            "next_day": self.day_target(NEXT) is not None,
            "prev_week": self.week_target(PREVIOUS) is not None,
            "next_week": self.week_target(NEXT) is not None,
        }

    # ------------------------------------------------------------------
    # Calendar paging
    # ------------------------------------------------------------------

    def show_month(self, index: int) -> Optional[CalendarMonth]:
        if not self.months:
            return None
        self.month_index = min(max(index, 0), len(self.months) - 1)
        return self.months[self.month_index]

    def prev_month(self) -> Optional[CalendarMonth]:
        return self.show_month(self.month_index - 1)

    def next_month(self) -> Optional[CalendarMonth]:
        return self.show_month(self.month_index + 1)

    @property
    def can_page_back(self) -> bool:
        return bool(self.months) and self.month_index > 0

    @property
    def can_page_forward(self) -> bool:
        return bool(self.months) and self.month_index < len(self.months) - 1

    def current_month(self) -> Optional[CalendarMonth]:
        return self.months[self.month_index] if self.months else None

    @property
    def weekday_headers(self) -> Tuple[str, ...]:
        return WEEKDAY_HEADERS

    def month_grid(self) -> List[CalendarCell]:
        month = self.current_month()
        if month is None:
            return []
        return month.grid(self.selected_date)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = MAX_RESULTS) -> List[SearchResult]:
        return self.search_index.search(query, limit=limit)
