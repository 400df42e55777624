"""JSON-safe dict form of a class instance (storage payload and API body)."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from ..core.enums import AttendanceSource, AttendanceStatus, InstanceKind, InstanceStatus
from .identity import InstanceKey
from .model import AttendanceRecord, ClassInstance, PreCheckin


def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def pre_checkin_to_dict(p: PreCheckin) -> dict[str, Any]:
    return {
        "id": p.checkin_id,
        "student_id": p.student_id,
        "student_name": p.student_name,
        "checked_in_at": _dt(p.checked_in_at),
        "cancelled": p.cancelled,
        "cancel_reason": p.cancel_reason,
        "cancelled_at": _dt(p.cancelled_at),
    }


def attendance_to_dict(a: AttendanceRecord) -> dict[str, Any]:
    return {
        "student_id": a.student_id,
        "student_name": a.student_name,
        "status": a.status.value,
        "source": a.source.value,
        "confirmed_at": _dt(a.confirmed_at),
        "staff_id": a.staff_id,
        "note": a.note,
    }


def instance_to_dict(instance: ClassInstance) -> dict[str, Any]:
    return {
        "identity": str(instance.identity),
        "date": instance.class_date.isoformat(),
        "start_time": instance.start_time.isoformat(),
        "end_time": instance.end_time.isoformat(),
        "unit": instance.unit,
        "kind": instance.kind.value,
        "level_id": instance.level_id,
        "capacity": instance.capacity,
        "source_template_id": instance.source_template_id,
        "session_id": instance.session_id,
        "status": instance.status.value,
        "pre_checkins": [pre_checkin_to_dict(p) for p in instance.pre_checkins],
        "attendance": [attendance_to_dict(a) for a in instance.attendance],
        "created_at": _dt(instance.created_at),
        "updated_at": _dt(instance.updated_at),
    }


def instance_from_dict(data: dict[str, Any]) -> ClassInstance:
    return ClassInstance(
        identity=InstanceKey.parse(data["identity"]),
        class_date=date.fromisoformat(data["date"]),
        start_time=time.fromisoformat(data["start_time"]),
        end_time=time.fromisoformat(data["end_time"]),
        unit=data["unit"],
        kind=InstanceKind(data["kind"]),
        level_id=data.get("level_id"),
        capacity=data.get("capacity"),
        source_template_id=data.get("source_template_id"),
        session_id=data.get("session_id"),
        status=InstanceStatus(data.get("status", InstanceStatus.OPEN.value)),
        pre_checkins=tuple(
            PreCheckin(
                checkin_id=int(p["id"]),
                student_id=int(p["student_id"]),
                student_name=p["student_name"],
                checked_in_at=_parse_dt(p["checked_in_at"]),
                cancelled=bool(p.get("cancelled", False)),
                cancel_reason=p.get("cancel_reason"),
                cancelled_at=_parse_dt(p.get("cancelled_at")),
            )
            for p in data.get("pre_checkins", [])
        ),
        attendance=tuple(
            AttendanceRecord(
                student_id=int(a["student_id"]),
                status=AttendanceStatus(a["status"]),
                confirmed_at=_parse_dt(a["confirmed_at"]),
                student_name=a.get("student_name"),
                source=AttendanceSource(a.get("source", AttendanceSource.PRE_CHECKIN.value)),
                staff_id=a.get("staff_id"),
                note=a.get("note"),
            )
            for a in data.get("attendance", [])
        ),
        created_at=_parse_dt(data.get("created_at")),
        updated_at=_parse_dt(data.get("updated_at")),
    )
