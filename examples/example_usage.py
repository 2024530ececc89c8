"""Drive the service layer directly, without Flask.

Needs a database prepared with scripts/init_db.py and scripts/seed_db.py.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from src.parade_system.parade_system.container import build_container
from src.parade_system.parade_system.core.enums import Role


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    parade = container.parade_service.get_open_parade()
    if parade is None:
        print("No open parade. Default types:", container.parade_service.default_parade_types())
        return

    print("Open parade:", parade.to_dict())
    for slot in container.parade_service.pending_slots(parade):
        print("Pending:", slot.label())

    sheet = container.attendance_service.load_sheet(parade_id=parade.parade_id, category=parade.categories[0], division="SD")
    for row in sheet.rows:
        print(row.to_dict())

    review = container.parade_service.build_review(parade_id=parade.parade_id)
    print("Can close:", review.can_close, "as", Role.ANO.value)


if __name__ == "__main__":
    main()
