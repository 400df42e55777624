from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional, Tuple

from ..core.enums import AttendanceSource, AttendanceStatus, InstanceKind, InstanceStatus
from .identity import InstanceKey


@dataclass(frozen=True)
class PreCheckin:
    """A student's request to attend. Cancelled entries stay for audit."""

    checkin_id: int
    student_id: int
    student_name: str
    checked_in_at: datetime
    cancelled: bool = False
    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Staff-confirmed presence or absence; one per student per instance."""

    student_id: int
    status: AttendanceStatus
    confirmed_at: datetime
    student_name: Optional[str] = None
    source: AttendanceSource = AttendanceSource.PRE_CHECKIN
    staff_id: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ClassInstance:
    """One concrete, date-bound occurrence of a class (one attendance list).

    ``created_at`` is only set once the instance has been materialized
    (saved after its first mutation); projected instances leave both
    timestamps empty.
    """

    identity: InstanceKey
    class_date: date
    start_time: time
    end_time: time
    unit: str
    kind: InstanceKind
    level_id: Optional[int] = None
    capacity: Optional[int] = None
    source_template_id: Optional[int] = None
    session_id: Optional[int] = None
    status: InstanceStatus = InstanceStatus.OPEN
    pre_checkins: Tuple[PreCheckin, ...] = field(default_factory=tuple)
    attendance: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if (self.source_template_id is None) == (self.session_id is None):
            raise ValueError("exactly one of source_template_id / session_id must be set")
        if self.kind == InstanceKind.REGULAR and self.source_template_id is None:
            raise ValueError("regular instance requires source_template_id")
        if self.kind == InstanceKind.SPECIAL and self.session_id is None:
            raise ValueError("special instance requires session_id")
        if (self.identity.kind, self.identity.source_id, self.identity.class_date) != (
            self.kind,
            self.source_id,
            self.class_date,
        ):
            raise ValueError(f"identity {self.identity} does not match instance fields")

    @property
    def source_id(self) -> int:
        return self.source_template_id if self.kind == InstanceKind.REGULAR else self.session_id

    @property
    def is_materialized(self) -> bool:
        return self.created_at is not None

    def ends_at(self) -> datetime:
        return datetime.combine(self.class_date, self.end_time)


@dataclass(frozen=True)
class InstanceSummary:
    """Read-model for the roster card (seats, presence counters)."""

    identity: str
    occupied: int
    available: Optional[int]
    is_full: bool
    present: int
    absent: int
    cancelled: int
    has_ended: bool
