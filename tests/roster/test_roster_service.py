from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta

import pytest

from src.class_roster.class_roster.core.enums import InstanceKind, InstanceStatus, Weekday
from src.class_roster.class_roster.core.exceptions import (
    CapacityExceededError,
    DuplicateCheckinError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.class_roster.class_roster.roster.identity import InstanceKey, derive_identity
from src.class_roster.class_roster.roster.policies.inherit_policy import InheritTemplatePolicy
from src.class_roster.class_roster.roster.service import RosterService
from src.class_roster.class_roster.schedules.model import ScheduleTemplate

SATURDAY = date(2025, 7, 5)
SLOT = derive_identity(1, SATURDAY, InstanceKind.REGULAR)
SESSION = derive_identity(1, SATURDAY, InstanceKind.SPECIAL)


def test_day_view_sorted_by_start_time(service, templates):
    templates.weekly.append(
        ScheduleTemplate(
            template_id=2,
            active=True,
            weekday=Weekday.SATURDAY,
            start_time=time(7, 0),
            end_time=time(8, 0),
            unit="Praia",
        )
    )

    day = service.get_instances_for_date(SATURDAY)

    assert [str(i.identity) for i in day] == [
        "regular:2:2025-07-05",
        "regular:1:2025-07-05",
        "special:1:2025-07-05",
    ]


def test_day_without_classes_is_empty(service):
    assert service.get_instances_for_date(date(2025, 7, 2)) == []


def test_untouched_instances_are_not_stored(service, instances):
    service.get_instances_for_date(SATURDAY)
    service.get_instances_for_range(date(2025, 6, 30), date(2025, 7, 6))

    assert instances.by_key == {}


def test_first_checkin_materializes_instance(service, instances, fixed_now):
    out = service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")

    assert out.created_at == fixed_now and out.updated_at == fixed_now
    assert instances.get(SLOT) == out


def test_regeneration_reproduces_mutation_without_duplicates(service, clock):
    service.add_pre_checkin(SESSION, student_id=1, student_name="Ana")
    clock.now = datetime(2025, 7, 2, 9, 0)

    day = service.get_instances_for_date(SATURDAY)

    assert len({i.identity for i in day}) == len(day) == 2
    session = next(i for i in day if i.identity == SESSION)
    assert [p.student_id for p in session.pre_checkins] == [1]


def test_created_at_kept_on_later_mutations(service, clock, fixed_now):
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")
    clock.now = datetime(2025, 7, 3, 12, 0)

    out = service.add_pre_checkin(SLOT, student_id=2, student_name="Bia")

    assert out.created_at == fixed_now
    assert out.updated_at == datetime(2025, 7, 3, 12, 0)


def test_special_session_capacity_through_service(service):
    for student_id in range(1, 6):
        service.add_pre_checkin(SESSION, student_id=student_id, student_name=f"Aluno {student_id}")

    with pytest.raises(CapacityExceededError):
        service.add_pre_checkin(SESSION, student_id=6, student_name="Aluno 6")

    summary = service.summary(SESSION)
    assert summary.available == 0 and summary.is_full


def test_rejected_operation_does_not_write(service, instances):
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")
    saves = instances.saves

    with pytest.raises(DuplicateCheckinError):
        service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")

    assert instances.saves == saves


def test_cancel_and_confirm_flow(service):
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")
    service.add_pre_checkin(SLOT, student_id=2, student_name="Bia")
    service.cancel_pre_checkin(SLOT, checkin_id=2, reason="  doente ")
    service.confirm_attendance(SLOT, student_id=1, present=True, staff_id=5)
    service.confirm_attendance(SLOT, student_id=1, present=True, staff_id=5)
    service.confirm_presences(SLOT)
    out = service.close_instance(SLOT)

    assert out.status == InstanceStatus.CLOSED
    assert out.pre_checkins[1].cancel_reason == "doente"
    assert len(out.attendance) == 1
    with pytest.raises(InvalidTransitionError):
        service.add_pre_checkin(SLOT, student_id=3, student_name="Caio")


def test_persisted_instance_survives_template_deactivation(service, templates):
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")
    templates.weekly[0] = replace(templates.weekly[0], active=False)

    day = service.get_instances_for_date(SATURDAY)

    assert [i.identity for i in day] == [SLOT, SESSION]
    assert service.get_instance(SLOT).pre_checkins[0].student_id == 1


def test_frozen_policy_keeps_saved_capacity(service, templates):
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")
    templates.weekly[0] = replace(templates.weekly[0], capacity=1, start_time=time(9, 0))

    out = service.get_instance(SLOT)

    assert (out.capacity, out.start_time) == (10, time(8, 0))


def test_inherit_policy_follows_template_edits(templates, instances, clock):
    service = RosterService(templates, instances, policy=InheritTemplatePolicy(), clock=clock)
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")
    templates.weekly[0] = replace(templates.weekly[0], capacity=1, start_time=time(9, 0))

    day = service.get_instances_for_date(SATURDAY)
    out = next(i for i in day if i.identity == SLOT)

    assert [i.start_time for i in day] == sorted(i.start_time for i in day)
    assert [str(i.identity) for i in day] == ["special:1:2025-07-05", "regular:1:2025-07-05"]
    assert (out.identity, out.capacity, out.start_time) == (SLOT, 1, time(9, 0))
    with pytest.raises(CapacityExceededError):
        service.add_pre_checkin(SLOT, student_id=2, student_name="Bia")


def test_unknown_instance_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.add_pre_checkin(derive_identity(1, date(2025, 7, 6)), student_id=1, student_name="Ana")
    with pytest.raises(NotFoundError):
        service.get_instance(InstanceKey.parse("special:99:2025-07-05"))


def test_delete_returns_to_projection(service):
    service.add_pre_checkin(SLOT, student_id=1, student_name="Ana")

    service.delete_instance(SLOT)

    assert service.get_instance(SLOT).pre_checkins == ()
    with pytest.raises(NotFoundError):
        service.delete_instance(SLOT)


def test_input_validation(service):
    with pytest.raises(ValidationError):
        service.add_pre_checkin(SLOT, student_id=0, student_name="Ana")
    with pytest.raises(ValidationError):
        service.add_pre_checkin(SLOT, student_id=True, student_name="Ana")
    with pytest.raises(ValidationError):
        service.add_pre_checkin(SLOT, student_id=1, student_name="   ")
    with pytest.raises(ValidationError):
        RosterService(None, None, window_days=0)


def test_week_view_groups_every_day(service):
    week = service.get_instances_for_range(date(2025, 6, 30), date(2025, 7, 6))

    assert list(week) == [date(2025, 6, 30) + timedelta(days=n) for n in range(7)]
    assert [len(v) for v in week.values()] == [0, 0, 0, 0, 0, 2, 0]


def test_week_view_rejects_bad_range(service):
    with pytest.raises(ValidationError):
        service.get_instances_for_range(date(2025, 7, 6), date(2025, 6, 30))
    with pytest.raises(ValidationError):
        service.get_instances_for_range(date(2025, 6, 1), date(2025, 8, 1))


def test_window_starts_today(service):
    assert service.window() == (date(2025, 6, 30), date(2025, 7, 29))
