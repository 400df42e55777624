from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from ..common.logging import get_logger
from .connection import DatabaseConnection

log = get_logger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql stays usable whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ';' (quotes and backslash escapes respected)."""
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def _run_sql_file(conn_factory: DatabaseConnection, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))

    executed = 0
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    finally:
        conn.close()
    return executed


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> int:
    """Apply schema.sql (CREATE TABLE IF NOT EXISTS, so idempotent).

    Returns the number of statements executed.
    """
    ensure_database_exists(conn_factory)
    executed = _run_sql_file(conn_factory, schema_path)
    log.info("schema_applied", statements=executed, database=conn_factory.config.database)
    return executed


def apply_seed(conn_factory: DatabaseConnection, *, seed_path: str | Path) -> int:
    executed = _run_sql_file(conn_factory, seed_path)
    log.info("seed_applied", statements=executed, database=conn_factory.config.database)
    return executed
