from __future__ import annotations

from typing import Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time, optional_int
from .model import ScheduleTemplate, SpecialSession
from .repository import TemplateStore


def template_from_row(r: dict) -> ScheduleTemplate:
    return ScheduleTemplate(
        template_id=int(r["template_id"]),
        active=bool(r["active"]),
        weekday=Weekday(int(r["weekday"])),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        unit=r["unit"],
        level_id=optional_int(r.get("level_id")),
        capacity=optional_int(r.get("capacity")),
        starts_on=r.get("starts_on"),
        ends_on=r.get("ends_on"),
    )


def session_from_row(r: dict) -> SpecialSession:
    return SpecialSession(
        session_id=int(r["session_id"]),
        active=bool(r["active"]),
        session_date=r["session_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        unit=r["unit"],
        level_id=optional_int(r.get("level_id")),
        capacity=optional_int(r.get("capacity")),
        name=r.get("name"),
    )


class MySQLTemplateStore(TemplateStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_weekly_templates(self) -> Sequence[ScheduleTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT template_id, active, weekday, start_time, end_time, unit,
                       level_id, capacity, starts_on, ends_on
                FROM schedule_templates
                WHERE active=1
                ORDER BY template_id
                """
            )
            return [template_from_row(r) for r in fetchall(cur)]

    def get_active_special_sessions(self) -> Sequence[SpecialSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, active, name, session_date, start_time, end_time, unit,
                       level_id, capacity
                FROM special_sessions
                WHERE active=1
                ORDER BY session_id
                """
            )
            return [session_from_row(r) for r in fetchall(cur)]
