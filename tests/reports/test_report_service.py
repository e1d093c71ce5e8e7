from __future__ import annotations

import io
from datetime import date, datetime

import pandas as pd
import pytest

from src.shift_attendance.shift_attendance.core.enums import WorkerStatus
from src.shift_attendance.shift_attendance.core.exceptions import ValidationError
from src.shift_attendance.shift_attendance.reports.exporter import (
    ATTENDANCE_DAYS_COLUMNS,
    HISTORY_COLUMNS,
    to_csv,
    to_xlsx,
)
from src.shift_attendance.shift_attendance.reports.service import ReportService, fulfillment_rate

NOW = datetime(2024, 3, 20, 12, 0)


@pytest.fixture
def seeded(attendance_repo, worker_repo, make_worker, make_descriptor):
    budi = make_worker("OPS001", "Budi")
    siti = make_worker("OPS002", "Siti")
    worker_repo.create(budi)
    worker_repo.create(siti)
    worker_repo.create(make_worker("OPS003", "Andi", status=WorkerStatus.BLACKLIST))

    attendance_repo.add_session("early", make_descriptor(day=date(2024, 3, 4), plan_mpp=2))
    attendance_repo.add_record("early", budi, datetime(2024, 3, 4, 7, 0), checkout_timestamp=datetime(2024, 3, 4, 15, 30))
    attendance_repo.add_record("early", siti, datetime(2024, 3, 4, 7, 5), is_takeout=True)

    attendance_repo.add_session("late", make_descriptor(day=date(2024, 3, 18), plan_mpp=1))
    attendance_repo.add_record("late", budi, datetime(2024, 3, 18, 7, 0))
    attendance_repo.add_record("late", siti, datetime(2024, 3, 18, 7, 1))
    return attendance_repo, worker_repo


@pytest.fixture
def service(seeded):
    attendance_repo, worker_repo = seeded
    return ReportService(attendance_repo, worker_repo, clock=lambda: NOW)


def test_fulfillment_rate():
    assert fulfillment_rate([]) == "0%"


def test_dashboard(service):
    dash = service.dashboard()

    assert dash["date"] == "2024-03-20"
    assert dash["activeWorkers"] == 2
    assert dash["counts"] == {"today": 0, "thisWeek": 2, "thisMonth": 3, "period1": 1, "period2": 2}
    assert dash["fulfillment"] == {"period1": "50.0%", "period2": "200.0%"}


def test_attendance_days_defaults_to_current_month(service):
    rows = service.attendance_days()
    assert [(r["ops_id"], r["days"]) for r in rows] == [("OPS001", 2), ("OPS002", 1)]


def test_attendance_days_rejects_inverted_range(service):
    with pytest.raises(ValidationError):
        service.attendance_days(start=date(2024, 3, 31), end=date(2024, 3, 1))


def test_period_report(service):
    rows = service.period_report(year=2024, month=3)
    assert [(r["opsId"], r["period1"], r["period2"]) for r in rows] == [("OPS001", 1, 1), ("OPS002", 0, 1)]

    with pytest.raises(ValidationError):
        service.period_report(year=2024, month=13)


def test_history_report_rows(service):
    report = service.build_history_report(start=date(2024, 3, 1), end=date(2024, 3, 31))

    by_key = {(r["date"], r["ops_id"]): r for r in report.rows}
    assert by_key[("2024-03-04", "OPS001")]["work_duration"] == "8h 30m"
    assert by_key[("2024-03-04", "OPS002")]["status"] == "Take Out"
    assert by_key[("2024-03-04", "OPS002")]["check_out"] == "16:05:00"
    assert by_key[("2024-03-18", "OPS001")]["check_out"] == "16:00:00"
    assert {(s["ops_id"], s["days"]) for s in report.summary} == {("OPS001", 2), ("OPS002", 1)}


def test_history_report_empty_range(service):
    report = service.build_history_report(start=date(2023, 1, 1), end=date(2023, 1, 31))
    assert report.rows == []
    assert report.summary == []


def test_csv_export_uses_labels_and_bom(service):
    report = service.build_history_report()
    payload = to_csv(report.rows, HISTORY_COLUMNS)

    assert payload.startswith(b"\xef\xbb\xbf")
    header = payload.decode("utf-8-sig").splitlines()[0]
    assert header.split(",") == list(HISTORY_COLUMNS.values())


def test_xlsx_export_has_one_sheet_per_table(service):
    report = service.build_history_report()
    payload = to_xlsx({"History": (report.rows, HISTORY_COLUMNS), "Days": (report.summary, ATTENDANCE_DAYS_COLUMNS)})

    sheets = pd.read_excel(io.BytesIO(payload), sheet_name=None)
    assert list(sheets) == ["History", "Days"]
    assert len(sheets["History"]) == 4
    assert list(sheets["Days"].columns) == list(ATTENDANCE_DAYS_COLUMNS.values())
