"""Example: drive the service layer directly, without Flask."""

import importlib
import json

from config import get_settings_module

from src.shift_attendance.shift_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    print(json.dumps(container.report_service.dashboard(), indent=2))
    for row in container.report_service.attendance_days()[:10]:
        print(f"{row['ops_id']:<12} {row['full_name']:<30} {row['days']}")


if __name__ == "__main__":
    main()
