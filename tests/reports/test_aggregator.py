from __future__ import annotations

from datetime import date, datetime

import pytest

from src.shift_attendance.shift_attendance.attendance.model import AttendanceRecord, AttendanceSession
from src.shift_attendance.shift_attendance.reports.aggregator import count_attendance_days, period_counts


def _session(session_id, day, *records):
    return AttendanceSession(
        session_id=session_id,
        date=day,
        division="ASM2",
        shift_time="07:00 - 16:00",
        shift_id="SOCSTROPS0716 Shift 07 07:00 - 19:00",
        plan_mpp=2,
        records=tuple(records),
    )


def _rec(record_id, worker, day, **fields):
    return AttendanceRecord(
        record_id=record_id,
        session_id="x",
        worker_id=worker.worker_id,
        timestamp=datetime.combine(day, datetime.min.time()),
        ops_id=worker.ops_id,
        full_name=worker.full_name,
        **fields,
    )


@pytest.fixture
def people(make_worker):
    return make_worker("OPS001", "Budi"), make_worker("OPS002", "Siti")


def test_counts_one_day_per_session(people):
    budi, siti = people
    d = date(2024, 3, 5)
    sessions = [
        _session("a", d, _rec(1, budi, d), _rec(2, budi, d), _rec(3, siti, d)),
        _session("b", d, _rec(4, budi, d)),
    ]

    counts = count_attendance_days(sessions, people, date(2024, 3, 1), date(2024, 3, 31))

    assert [(c.ops_id, c.days) for c in counts] == [("OPS001", 2), ("OPS002", 1)]


def test_takeout_records_do_not_count(people):
    budi, siti = people
    d = date(2024, 3, 5)
    sessions = [_session("a", d, _rec(1, budi, d, is_takeout=True), _rec(2, siti, d))]

    counts = count_attendance_days(sessions, people, d, d)

    assert [c.ops_id for c in counts] == ["OPS002"]


def test_interval_bounds_are_inclusive(people):
    budi, _ = people
    days = [date(2024, 3, 1), date(2024, 3, 15), date(2024, 3, 16)]
    sessions = [_session(str(i), d, _rec(i, budi, d)) for i, d in enumerate(days)]

    counts = count_attendance_days(sessions, people, date(2024, 3, 1), date(2024, 3, 15))

    assert counts[0].days == 2


def test_deleted_worker_keeps_recorded_name(make_worker):
    gone = make_worker("OPS404", "Gone Worker")
    d = date(2024, 3, 5)

    counts = count_attendance_days([_session("a", d, _rec(1, gone, d))], [], d, d)

    assert (counts[0].ops_id, counts[0].full_name) == ("OPS404", "Gone Worker")


def test_missing_names_fall_back_to_registry_then_unknown(make_worker):
    live = make_worker("OPS001", "Budi")
    d = date(2024, 3, 5)
    anonymous = [
        AttendanceRecord(record_id=1, session_id="a", worker_id=live.worker_id, timestamp=datetime(2024, 3, 5, 7)),
        AttendanceRecord(record_id=2, session_id="a", worker_id="ghost", timestamp=datetime(2024, 3, 5, 7)),
    ]

    counts = count_attendance_days([_session("a", d, *anonymous)], [live], d, d)

    names = {c.worker_id: (c.ops_id, c.full_name) for c in counts}
    assert names[live.worker_id] == ("OPS001", "Budi")
    assert names["ghost"] == ("N/A", "Unknown")


def test_period_counts_split_month_at_the_fifteenth(people):
    budi, siti = people
    d15, d16, d29 = date(2024, 2, 15), date(2024, 2, 16), date(2024, 2, 29)
    sessions = [
        _session("a", d15, _rec(1, budi, d15)),
        _session("b", d16, _rec(2, budi, d16), _rec(3, siti, d16)),
        _session("c", d29, _rec(4, siti, d29)),
        _session("d", date(2024, 3, 1), _rec(5, siti, date(2024, 3, 1))),
    ]

    rows = period_counts(sessions, people, 2024, 2)

    by_ops = {r["opsId"]: (r["period1"], r["period2"]) for r in rows}
    assert by_ops == {"OPS001": (1, 1), "OPS002": (0, 2)}
