"""Expand class templates into concrete instances over a date window."""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Iterable, Tuple

from ..common.datetime_utils import iter_dates
from ..core.constants import DEFAULT_WINDOW_DAYS, PROJECTION_CACHE_SIZE
from ..core.enums import InstanceKind, InstanceStatus
from ..core.exceptions import IdentityCollisionError
from ..schedules.model import ScheduleTemplate, SpecialSession
from .identity import derive_identity
from .model import ClassInstance


def project(
    templates: Iterable[ScheduleTemplate],
    special_sessions: Iterable[SpecialSession],
    window_start: date,
    window_length_days: int = DEFAULT_WINDOW_DAYS,
) -> Tuple[ClassInstance, ...]:
    """Project every active template onto each date of the window.

    Pure and deterministic: output is ordered by date, regular slots before
    special sessions, then by input order. Results are memoized on the
    (immutable) inputs, so editing a template yields a new cache key.
    """
    return _project(tuple(templates), tuple(special_sessions), window_start, int(window_length_days))


@lru_cache(maxsize=PROJECTION_CACHE_SIZE)
def _project(
    templates: Tuple[ScheduleTemplate, ...],
    special_sessions: Tuple[SpecialSession, ...],
    window_start: date,
    window_length_days: int,
) -> Tuple[ClassInstance, ...]:
    out: list[ClassInstance] = []
    seen = set()

    def emit(instance: ClassInstance) -> None:
        if instance.identity in seen:
            raise IdentityCollisionError(f"identity {instance.identity} projected twice")
        seen.add(instance.identity)
        out.append(instance)

    for day in iter_dates(window_start, window_length_days):
        for t in templates:
            if t.runs_on(day):
                emit(regular_instance(t, day))
        for s in special_sessions:
            if s.runs_on(day):
                emit(special_instance(s))

    return tuple(out)


def regular_instance(template: ScheduleTemplate, day: date) -> ClassInstance:
    return ClassInstance(
        identity=derive_identity(template.template_id, day, InstanceKind.REGULAR),
        class_date=day,
        start_time=template.start_time,
        end_time=template.end_time,
        unit=template.unit,
        kind=InstanceKind.REGULAR,
        level_id=template.level_id,
        capacity=template.capacity,
        source_template_id=template.template_id,
        status=InstanceStatus.OPEN,
    )


def special_instance(session: SpecialSession) -> ClassInstance:
    return ClassInstance(
        identity=derive_identity(session.session_id, session.session_date, InstanceKind.SPECIAL),
        class_date=session.session_date,
        start_time=session.start_time,
        end_time=session.end_time,
        unit=session.unit,
        kind=InstanceKind.SPECIAL,
        level_id=session.level_id,
        capacity=session.capacity,
        session_id=session.session_id,
        status=InstanceStatus.OPEN,
    )
