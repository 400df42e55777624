from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_roster.class_roster.common.logging import get_logger, setup_logging
from src.class_roster.class_roster.database.bootstrap import apply_schema
from src.class_roster.class_roster.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    setup_logging(log_level=getattr(settings, "LOG_LEVEL", "INFO"))

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))
    executed = apply_schema(conn, schema_path=REPO_ROOT / "database" / "schema.sql")
    get_logger(__name__).info("init_db_done", db=conn.config.describe(), statements=executed)


if __name__ == "__main__":
    main()
