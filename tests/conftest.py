from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

import pytest

from src.class_roster.class_roster.core.enums import Weekday
from src.class_roster.class_roster.roster.identity import InstanceKey
from src.class_roster.class_roster.roster.model import ClassInstance
from src.class_roster.class_roster.roster.service import RosterService
from src.class_roster.class_roster.schedules.model import ScheduleTemplate, SpecialSession


@dataclass
class InMemoryTemplates:
    weekly: list[ScheduleTemplate] = field(default_factory=list)
    special: list[SpecialSession] = field(default_factory=list)

    def get_active_weekly_templates(self):
        return [t for t in self.weekly if t.active]

    def get_active_special_sessions(self):
        return [s for s in self.special if s.active]


class InMemoryInstances:
    def __init__(self):
        self.by_key: dict[InstanceKey, ClassInstance] = {}
        self.saves = 0

    def load_persisted_instances(self, start: date, end: date):
        return {k: v for k, v in self.by_key.items() if start <= k.class_date <= end}

    def get(self, key: InstanceKey) -> Optional[ClassInstance]:
        return self.by_key.get(key)

    def save_instance(self, instance: ClassInstance) -> None:
        self.saves += 1
        self.by_key[instance.identity] = instance

    def delete(self, key: InstanceKey) -> bool:
        return self.by_key.pop(key, None) is not None


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 6, 30, 7, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def saturday_slot() -> ScheduleTemplate:
    return ScheduleTemplate(
        template_id=1,
        active=True,
        weekday=Weekday.SATURDAY,
        start_time=time(8, 0),
        end_time=time(10, 0),
        unit="Centro",
        capacity=10,
    )


@pytest.fixture
def special_session() -> SpecialSession:
    return SpecialSession(
        session_id=1,
        active=True,
        session_date=date(2025, 7, 5),
        start_time=time(8, 0),
        end_time=time(9, 0),
        unit="Centro",
        capacity=5,
        name="Aulão de sábado",
    )


@pytest.fixture
def templates(saturday_slot, special_session) -> InMemoryTemplates:
    return InMemoryTemplates(weekly=[saturday_slot], special=[special_session])


@pytest.fixture
def instances() -> InMemoryInstances:
    return InMemoryInstances()


@pytest.fixture
def service(templates, instances, clock) -> RosterService:
    return RosterService(templates, instances, window_days=30, clock=clock)
