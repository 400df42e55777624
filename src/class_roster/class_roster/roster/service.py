from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from ..common.datetime_utils import iter_dates, now_local
from ..common.logging import get_logger
from ..common.validators import optional_text, require_non_empty, require_positive_id
from ..core.constants import DEFAULT_WINDOW_DAYS
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..schedules.repository import TemplateStore
from . import state_machine
from .identity import InstanceKey
from .merger import reconcile
from .model import ClassInstance, InstanceSummary
from .policies.base import MaterializedInstancePolicy
from .policies.frozen_policy import FrozenPolicy
from .projector import project
from .repository import InstanceRepository

log = get_logger(__name__)

MAX_RANGE_DAYS = 31


def _display_order(instance: ClassInstance):
    return (instance.class_date, instance.start_time, instance.unit, instance.identity)


class RosterService:
    """Daily attendance lists: projection + persisted overrides + check-in workflow.

    The projection window always starts at today's date (from ``clock``).
    An instance is written to ``instances`` only when an operation changes it.
    """

    def __init__(
        self,
        templates: TemplateStore,
        instances: InstanceRepository,
        *,
        window_days: int = DEFAULT_WINDOW_DAYS,
        policy: Optional[MaterializedInstancePolicy] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        if int(window_days) <= 0:
            raise ValidationError("window_days must be positive")
        self._templates = templates
        self._instances = instances
        self._window_days = int(window_days)
        self._policy = policy or FrozenPolicy()
        self._clock = clock

    def _project_window(self) -> Tuple[ClassInstance, ...]:
        return project(
            self._templates.get_active_weekly_templates(),
            self._templates.get_active_special_sessions(),
            self._clock().date(),
            self._window_days,
        )

    def _authoritative(self, start: date, end: date) -> List[ClassInstance]:
        projected = [i for i in self._project_window() if start <= i.class_date <= end]
        persisted = self._instances.load_persisted_instances(start, end)
        by_key = {i.identity: i for i in projected}

        out = []
        for instance in reconcile(projected, persisted):
            if instance.identity in persisted:
                instance = self._policy.apply(instance, by_key.get(instance.identity))
            out.append(instance)
        return out

    def get_instances_for_date(self, day: date) -> List[ClassInstance]:
        return sorted(self._authoritative(day, day), key=_display_order)

    def get_instances_for_range(self, start: date, end: date) -> Dict[date, List[ClassInstance]]:
        """Week view: every date in [start, end] mapped to its sorted list."""
        if end < start:
            raise ValidationError("end date must not be before start date")
        days = (end - start).days + 1
        if days > MAX_RANGE_DAYS:
            raise ValidationError(f"range is limited to {MAX_RANGE_DAYS} days")

        grouped: Dict[date, List[ClassInstance]] = {d: [] for d in iter_dates(start, days)}
        for instance in sorted(self._authoritative(start, end), key=_display_order):
            grouped[instance.class_date].append(instance)
        return grouped

    def get_instance(self, key: InstanceKey) -> ClassInstance:
        projected = next((i for i in self._project_window() if i.identity == key), None)
        persisted = self._instances.get(key)
        if persisted is not None:
            return self._policy.apply(persisted, projected)
        if projected is None:
            raise NotFoundError(f"class {key} not found")
        return projected

    def summary(self, key: InstanceKey) -> InstanceSummary:
        return state_machine.summarize(self.get_instance(key), now=self._clock())

    def _mutate(self, key: InstanceKey, event: str, operation, **fields) -> ClassInstance:
        now = self._clock()
        instance = self.get_instance(key)
        try:
            updated = operation(instance, now)
        except DomainError as e:
            log.warning(f"{event}_rejected", identity=str(key), reason=type(e).__name__, detail=str(e), **fields)
            raise

        first_write = not instance.is_materialized
        saved = replace(updated, created_at=instance.created_at or now, updated_at=now)
        self._instances.save_instance(saved)
        log.info(event, identity=str(key), materialized=first_write, **fields)
        return saved

    def add_pre_checkin(self, key: InstanceKey, *, student_id: int, student_name: str) -> ClassInstance:
        student_id = require_positive_id(student_id, "student_id")
        student_name = require_non_empty(student_name, "student_name")
        return self._mutate(
            key,
            "pre_checkin_added",
            lambda i, now: state_machine.add_pre_checkin(i, student_id=student_id, student_name=student_name, now=now),
            student_id=student_id,
        )

    def cancel_pre_checkin(self, key: InstanceKey, *, checkin_id: int, reason: Optional[str] = None) -> ClassInstance:
        checkin_id = require_positive_id(checkin_id, "checkin_id")
        reason = optional_text(reason)
        return self._mutate(
            key,
            "pre_checkin_cancelled",
            lambda i, now: state_machine.cancel_pre_checkin(i, checkin_id=checkin_id, now=now, reason=reason),
            checkin_id=checkin_id,
        )

    def confirm_attendance(
        self,
        key: InstanceKey,
        *,
        student_id: int,
        present: bool,
        student_name: Optional[str] = None,
        staff_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> ClassInstance:
        student_id = require_positive_id(student_id, "student_id")
        staff_id = require_positive_id(staff_id, "staff_id") if staff_id is not None else None
        return self._mutate(
            key,
            "attendance_confirmed",
            lambda i, now: state_machine.confirm_attendance(
                i,
                student_id=student_id,
                present=bool(present),
                now=now,
                student_name=optional_text(student_name),
                staff_id=staff_id,
                note=optional_text(note),
            ),
            student_id=student_id,
            present=bool(present),
        )

    def confirm_presences(self, key: InstanceKey) -> ClassInstance:
        return self._mutate(key, "presences_confirmed", lambda i, now: state_machine.confirm_presences(i))

    def close_instance(self, key: InstanceKey) -> ClassInstance:
        return self._mutate(key, "instance_closed", lambda i, now: state_machine.close_instance(i))

    def delete_instance(self, key: InstanceKey) -> None:
        """Drop the saved version; the next read projects the class afresh."""
        if not self._instances.delete(key):
            raise NotFoundError(f"class {key} has no saved version")
        log.info("instance_deleted", identity=str(key))

    def window(self) -> Tuple[date, date]:
        start = self._clock().date()
        return start, start + timedelta(days=self._window_days - 1)
