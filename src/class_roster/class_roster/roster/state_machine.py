"""Pre-check-in and presence workflow of one class instance.

Every operation takes the current snapshot and returns a new one; nothing
here touches storage. List status moves open -> presence_confirmed ->
closed, and a closed list accepts no further changes.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceSource, AttendanceStatus, InstanceStatus
from ..core.exceptions import (
    CapacityExceededError,
    DuplicateCheckinError,
    InvalidTransitionError,
    NotFoundError,
)
from .model import AttendanceRecord, ClassInstance, InstanceSummary, PreCheckin

_ALLOWED_TRANSITIONS = {
    InstanceStatus.OPEN: {InstanceStatus.PRESENCE_CONFIRMED, InstanceStatus.CLOSED},
    InstanceStatus.PRESENCE_CONFIRMED: {InstanceStatus.CLOSED},
    InstanceStatus.CLOSED: set(),
}


def occupied(instance: ClassInstance) -> int:
    return sum(1 for p in instance.pre_checkins if not p.cancelled)


def available(instance: ClassInstance) -> Optional[int]:
    """Seats left, or None when the class has no capacity limit."""
    if instance.capacity is None:
        return None
    return max(instance.capacity - occupied(instance), 0)


def active_checkin_for(instance: ClassInstance, student_id: int) -> Optional[PreCheckin]:
    for p in instance.pre_checkins:
        if p.student_id == student_id and not p.cancelled:
            return p
    return None


def _require_not_closed(instance: ClassInstance) -> None:
    if instance.status == InstanceStatus.CLOSED:
        raise InvalidTransitionError(f"class {instance.identity} is closed")


def add_pre_checkin(instance: ClassInstance, *, student_id: int, student_name: str, now: datetime) -> ClassInstance:
    _require_not_closed(instance)
    if active_checkin_for(instance, student_id):
        raise DuplicateCheckinError(f"student {student_id} already checked in to {instance.identity}")
    if instance.capacity is not None and occupied(instance) >= instance.capacity:
        raise CapacityExceededError(f"class {instance.identity} is full ({instance.capacity} seats)")

    next_id = max((p.checkin_id for p in instance.pre_checkins), default=0) + 1
    checkin = PreCheckin(checkin_id=next_id, student_id=student_id, student_name=student_name, checked_in_at=now)
    return replace(instance, pre_checkins=instance.pre_checkins + (checkin,))


def cancel_pre_checkin(
    instance: ClassInstance,
    *,
    checkin_id: int,
    now: datetime,
    reason: Optional[str] = None,
) -> ClassInstance:
    _require_not_closed(instance)

    updated = []
    found = False
    for p in instance.pre_checkins:
        if p.checkin_id == checkin_id and not p.cancelled:
            p = replace(p, cancelled=True, cancel_reason=reason, cancelled_at=now)
            found = True
        updated.append(p)

    if not found:
        raise NotFoundError(f"no active pre-check-in {checkin_id} on {instance.identity}")
    return replace(instance, pre_checkins=tuple(updated))


def confirm_attendance(
    instance: ClassInstance,
    *,
    student_id: int,
    present: bool,
    now: datetime,
    student_name: Optional[str] = None,
    staff_id: Optional[int] = None,
    note: Optional[str] = None,
) -> ClassInstance:
    """Upsert the student's attendance record (walk-ins need no pre-check-in)."""
    _require_not_closed(instance)

    checkin = active_checkin_for(instance, student_id)
    previous = next((a for a in instance.attendance if a.student_id == student_id), None)
    record = AttendanceRecord(
        student_id=student_id,
        status=AttendanceStatus.PRESENT if present else AttendanceStatus.ABSENT,
        confirmed_at=now,
        student_name=student_name
        or (previous.student_name if previous else None)
        or (checkin.student_name if checkin else None),
        source=AttendanceSource.PRE_CHECKIN if checkin else AttendanceSource.WALK_IN,
        staff_id=staff_id,
        note=note,
    )
    others = tuple(a for a in instance.attendance if a.student_id != student_id)
    return replace(instance, attendance=others + (record,))


def _transition(instance: ClassInstance, target: InstanceStatus) -> ClassInstance:
    if target not in _ALLOWED_TRANSITIONS[instance.status]:
        raise InvalidTransitionError(f"cannot move {instance.identity} from {instance.status.value} to {target.value}")
    return replace(instance, status=target)


def confirm_presences(instance: ClassInstance) -> ClassInstance:
    return _transition(instance, InstanceStatus.PRESENCE_CONFIRMED)


def close_instance(instance: ClassInstance) -> ClassInstance:
    return _transition(instance, InstanceStatus.CLOSED)


def summarize(instance: ClassInstance, *, now: datetime) -> InstanceSummary:
    seats = available(instance)
    return InstanceSummary(
        identity=str(instance.identity),
        occupied=occupied(instance),
        available=seats,
        is_full=seats == 0,
        present=sum(1 for a in instance.attendance if a.status == AttendanceStatus.PRESENT),
        absent=sum(1 for a in instance.attendance if a.status == AttendanceStatus.ABSENT),
        cancelled=sum(1 for p in instance.pre_checkins if p.cancelled),
        has_ended=instance.ends_at() < now,
    )
