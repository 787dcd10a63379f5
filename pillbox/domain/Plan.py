"""Planner state: the Monday-aligned week being displayed, or today only."""
from datetime import date, timedelta
from typing import List, Optional, Tuple

from pillbox.utilities.constants import DAYS_PER_WEEK


def start_of_week(ref: date) -> date:
    '''Monday of the week containing ``ref``.'''
    return ref - timedelta(days=ref.weekday())


def week_days(start: date) -> List[date]:
    return [start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]


class PlannerState:
    def __init__(self, week_start: Optional[date] = None, today_only: bool = False,
                 today: Optional[date] = None):
        self.today = today or date.today()
        # The anchor is always a Monday, whatever date the caller passes.
        self.week_start = start_of_week(week_start or self.today)
        self.today_only = today_only

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=DAYS_PER_WEEK - 1)

    def previous_week(self) -> "PlannerState":
        return PlannerState(self.week_start - timedelta(days=DAYS_PER_WEEK), self.today_only, self.today)

    def next_week(self) -> "PlannerState":
        return PlannerState(self.week_start + timedelta(days=DAYS_PER_WEEK), self.today_only, self.today)

    def current_week(self) -> "PlannerState":
        return PlannerState(start_of_week(self.today), self.today_only, self.today)

    def with_today_only(self, flag: bool) -> "PlannerState":
        return PlannerState(self.week_start, flag, self.today)

    def days(self) -> List[date]:
        """Displayed days. Today-only mode ignores the stored anchor."""
        if self.today_only:
            return [self.today]
        return week_days(self.week_start)

    def date_range(self) -> Tuple[date, date]:
        shown = self.days()
        return shown[0], shown[-1]

    @property
    def is_current_week(self) -> bool:
        return self.week_start == start_of_week(self.today)

    def __str__(self) -> str:
        if self.today_only:
            return f"Today {self.today.isoformat()}"
        return f"Week {self.week_start.isoformat()} → {self.week_end.isoformat()}"

    __repr__ = __str__

    def to_dict(self):
        first, last = self.date_range()
        return {
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "today": self.today.isoformat(),
            "today_only": self.today_only,
            "from": first.isoformat(),
            "to": last.isoformat(),
            "previous_start": self.previous_week().week_start.isoformat(),
            "next_start": self.next_week().week_start.isoformat(),
            "current_start": self.current_week().week_start.isoformat(),
            "is_current_week": self.is_current_week,
        }
