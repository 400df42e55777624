from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleTemplate:
    """Weekly recurring class slot."""

    template_id: int
    active: bool
    weekday: Weekday
    start_time: time
    end_time: time
    unit: str
    level_id: Optional[int] = None
    capacity: Optional[int] = None
    starts_on: Optional[date] = None
    ends_on: Optional[date] = None

    def runs_on(self, day: date) -> bool:
        if not self.active or day.weekday() != int(self.weekday):
            return False
        if self.starts_on and day < self.starts_on:
            return False
        if self.ends_on and day > self.ends_on:
            return False
        return True


@dataclass(frozen=True)
class SpecialSession:
    """One-off class on an exact date (an "aulão")."""

    session_id: int
    active: bool
    session_date: date
    start_time: time
    end_time: time
    unit: str
    level_id: Optional[int] = None
    capacity: Optional[int] = None
    name: Optional[str] = None

    def runs_on(self, day: date) -> bool:
        return self.active and self.session_date == day
