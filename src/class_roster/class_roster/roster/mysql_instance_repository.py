from __future__ import annotations

import json
from datetime import date
from typing import Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .codec import instance_from_dict, instance_to_dict
from .identity import InstanceKey
from .model import ClassInstance
from .repository import InstanceRepository


def _from_row(r: dict) -> ClassInstance:
    payload = r["payload"]
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    return instance_from_dict(json.loads(payload) if isinstance(payload, str) else payload)


class MySQLInstanceRepository(InstanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load_persisted_instances(self, start: date, end: date) -> Dict[InstanceKey, ClassInstance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT identity, payload
                FROM class_instances
                WHERE instance_date BETWEEN %s AND %s
                ORDER BY identity
                """,
                (start, end),
            )
            out: Dict[InstanceKey, ClassInstance] = {}
            for r in fetchall(cur):
                instance = _from_row(r)
                out[instance.identity] = instance
            return out

    def get(self, key: InstanceKey) -> Optional[ClassInstance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT identity, payload FROM class_instances WHERE identity=%s", (str(key),))
            r = fetchone(cur)
            return _from_row(r) if r else None

    def save_instance(self, instance: ClassInstance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_instances(identity, instance_date, payload, updated_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload), updated_at=VALUES(updated_at)
                """,
                (
                    str(instance.identity),
                    instance.class_date,
                    json.dumps(instance_to_dict(instance)),
                    instance.updated_at,
                ),
            )

    def delete(self, key: InstanceKey) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_instances WHERE identity=%s", (str(key),))
            return cur.rowcount > 0
