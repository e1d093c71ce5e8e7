"""Insert a handful of demo workers; existing OpsIDs are left alone."""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.shift_attendance.shift_attendance.container import build_container
from src.shift_attendance.shift_attendance.core.exceptions import ValidationError

DEMO_WORKERS = [
    {"opsId": "OPS001", "fullName": "Budi Santoso", "nik": "3171000000000001", "phone": "081200000001", "department": "SOC Operator"},
    {"opsId": "OPS002", "fullName": "Siti Rahma", "nik": "3171000000000002", "phone": "081200000002", "department": "SOC Operator"},
    {"opsId": "OPS003", "fullName": "Andi Wijaya", "nik": "3171000000000003", "phone": "081200000003", "department": "Cache"},
    {"opsId": "OPS004", "fullName": "Dewi Lestari", "nik": "3171000000000004", "phone": "081200000004", "department": "Return"},
    {"opsId": "OPS005", "fullName": "Rudi Hartono", "nik": "3171000000000005", "phone": "081200000005", "department": "Inventory"},
]


def main() -> None:
    logging.basicConfig(level="INFO", format="%(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))

    created = 0
    for data in DEMO_WORKERS:
        try:
            container.worker_service.create(data)
            created += 1
        except ValidationError as e:
            print(f"skip {data['opsId']}: {e}")

    print(f"OK: Seeded {created} demo workers -> {container.conn.config.describe()}")


if __name__ == "__main__":
    main()
