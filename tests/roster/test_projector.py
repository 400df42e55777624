from __future__ import annotations

from datetime import date, time

import pytest

from src.class_roster.class_roster.core.enums import InstanceKind, InstanceStatus, Weekday
from src.class_roster.class_roster.core.exceptions import IdentityCollisionError
from src.class_roster.class_roster.roster.projector import project
from src.class_roster.class_roster.schedules.model import ScheduleTemplate, SpecialSession

MONDAY = date(2025, 6, 30)


def _slot(template_id: int, weekday: Weekday, **kw) -> ScheduleTemplate:
    fields = dict(
        template_id=template_id,
        active=True,
        weekday=weekday,
        start_time=time(8, 0),
        end_time=time(10, 0),
        unit="Centro",
        capacity=10,
    )
    fields.update(kw)
    return ScheduleTemplate(**fields)


def test_saturday_slot_over_thirty_days_from_monday(saturday_slot):
    out = project([saturday_slot], [], MONDAY, 30)

    assert [i.class_date for i in out] == [date(2025, 7, 5), date(2025, 7, 12), date(2025, 7, 19), date(2025, 7, 26)]
    assert all(i.class_date.weekday() == Weekday.SATURDAY for i in out)
    assert all(i.kind == InstanceKind.REGULAR and i.status == InstanceStatus.OPEN for i in out)
    assert all(i.pre_checkins == () and i.attendance == () for i in out)
    assert all(i.source_template_id == 1 and i.session_id is None for i in out)
    assert all(not i.is_materialized for i in out)


def test_projection_is_deterministic(saturday_slot, special_session):
    first = project([saturday_slot], [special_session], MONDAY, 30)
    second = project([saturday_slot], [special_session], MONDAY, 30)

    assert [i.identity for i in first] == [i.identity for i in second]
    assert first == second


def test_special_session_projected_only_on_its_date(saturday_slot, special_session):
    out = project([saturday_slot], [special_session], MONDAY, 30)
    on_day = [i for i in out if i.class_date == date(2025, 7, 5)]

    # same numeric id for slot and session; identities still differ
    assert [i.kind for i in on_day] == [InstanceKind.REGULAR, InstanceKind.SPECIAL]
    assert len({i.identity for i in on_day}) == 2
    special = on_day[1]
    assert special.session_id == 1 and special.source_template_id is None
    assert special.capacity == 5


def test_inactive_templates_and_sessions_are_skipped(special_session):
    inactive_slot = _slot(2, Weekday.MONDAY, active=False)
    inactive_session = SpecialSession(
        session_id=9,
        active=False,
        session_date=date(2025, 7, 1),
        start_time=time(18, 0),
        end_time=time(19, 0),
        unit="Praia",
    )

    assert project([inactive_slot], [inactive_session], MONDAY, 30) == ()


def test_session_outside_window_contributes_nothing(special_session):
    assert project([], [special_session], date(2025, 7, 6), 30) == ()
    assert project([], [special_session], MONDAY, 0) == ()


def test_template_bounds_limit_projection():
    slot = _slot(3, Weekday.WEDNESDAY, starts_on=date(2025, 7, 9), ends_on=date(2025, 7, 16))

    out = project([slot], [], MONDAY, 30)

    assert [i.class_date for i in out] == [date(2025, 7, 9), date(2025, 7, 16)]


def test_ordering_by_date_then_regular_then_special():
    monday = _slot(5, Weekday.MONDAY, start_time=time(19, 0), end_time=time(20, 0))
    tuesday = _slot(4, Weekday.TUESDAY)
    session = SpecialSession(
        session_id=7,
        active=True,
        session_date=MONDAY,
        start_time=time(6, 0),
        end_time=time(7, 0),
        unit="Centro",
    )

    out = project([tuesday, monday], [session], MONDAY, 2)

    assert [str(i.identity) for i in out] == [
        "regular:5:2025-06-30",
        "special:7:2025-06-30",
        "regular:4:2025-07-01",
    ]


def test_duplicate_template_ids_fail_loudly():
    a = _slot(1, Weekday.MONDAY)
    b = _slot(1, Weekday.MONDAY, start_time=time(18, 0), end_time=time(19, 0))

    with pytest.raises(IdentityCollisionError):
        project([a, b], [], MONDAY, 7)
