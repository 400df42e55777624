from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_local
from .core.constants import DEFAULT_TEMPLATE_EDIT_POLICY, DEFAULT_WINDOW_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .roster.mysql_instance_repository import MySQLInstanceRepository
from .roster.policies.factory import policy_for
from .roster.repository import InstanceRepository
from .roster.service import RosterService
from .schedules.mysql_template_store import MySQLTemplateStore
from .schedules.repository import TemplateStore


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    template_store: TemplateStore
    instances_repo: InstanceRepository

    roster_service: RosterService
    clock: Callable[[], datetime] = now_local


def build_container(
    *,
    db_config: dict,
    window_days: int = DEFAULT_WINDOW_DAYS,
    template_edit_policy: str = DEFAULT_TEMPLATE_EDIT_POLICY,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    template_store = MySQLTemplateStore(conn)
    instances_repo = MySQLInstanceRepository(conn)

    roster_service = RosterService(
        template_store,
        instances_repo,
        window_days=window_days,
        policy=policy_for(template_edit_policy),
        clock=now_local,
    )

    return Container(
        conn=conn,
        template_store=template_store,
        instances_repo=instances_repo,
        roster_service=roster_service,
        clock=now_local,
    )
