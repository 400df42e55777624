"""Example: drive the roster service without Flask.

Controllers are a thin layer; the attendance-list rules live in the service.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.class_roster.class_roster.common.logging import setup_logging
from src.class_roster.class_roster.container import build_container
from src.class_roster.class_roster.roster.codec import instance_to_dict


def main():
    settings = importlib.import_module(get_settings_module())
    setup_logging(log_level=settings.LOG_LEVEL)
    container = build_container(db_config=settings.DB_CONFIG, template_edit_policy=settings.TEMPLATE_EDIT_POLICY)

    for instance in container.roster_service.get_instances_for_date(date.today()):
        print(instance_to_dict(instance))


if __name__ == "__main__":
    main()
