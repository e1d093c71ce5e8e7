"""Attendance-day counts over closed date intervals.

Session dates and interval bounds are both plain local calendar dates, so a
session on the 15th always falls in the first half and the 16th in the second.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import first_half, second_half
from ..core.constants import UNKNOWN_NAME, UNKNOWN_OPS_ID
from ..attendance.model import AttendanceSession
from ..workers.model import Worker


@dataclass(frozen=True)
class WorkerAttendanceDays:
    worker_id: str
    ops_id: str
    full_name: str
    days: int


def _present_workers(session: AttendanceSession) -> dict[str, tuple[Optional[str], Optional[str]]]:
    """Distinct workers with at least one non-takeout record, with embedded names."""
    present: dict[str, tuple[Optional[str], Optional[str]]] = {}
    for record in session.records:
        if record.is_takeout:
            continue
        ops_id, full_name = present.get(record.worker_id, (None, None))
        present[record.worker_id] = (ops_id or record.ops_id, full_name or record.full_name)
    return present


def count_attendance_days(
    sessions: Iterable[AttendanceSession],
    workers: Iterable[Worker],
    start: date,
    end: date,
) -> list[WorkerAttendanceDays]:
    """Per-worker count of qualifying sessions dated within [start, end].

    A worker counts once per session however many records they have in it.
    Sorted by count, highest first.
    """
    registry: Mapping[str, Worker] = {w.worker_id: w for w in workers}
    totals: dict[str, int] = {}
    names: dict[str, tuple[Optional[str], Optional[str]]] = {}

    for session in sessions:
        if not (start <= session.date <= end):
            continue
        for worker_id, (ops_id, full_name) in _present_workers(session).items():
            totals[worker_id] = totals.get(worker_id, 0) + 1
            known_ops, known_name = names.get(worker_id, (None, None))
            names[worker_id] = (known_ops or ops_id, known_name or full_name)

    out: list[WorkerAttendanceDays] = []
    for worker_id, days in totals.items():
        ops_id, full_name = names[worker_id]
        live = registry.get(worker_id)
        out.append(
            WorkerAttendanceDays(
                worker_id=worker_id,
                ops_id=ops_id or (live.ops_id if live else UNKNOWN_OPS_ID),
                full_name=full_name or (live.full_name if live else UNKNOWN_NAME),
                days=days,
            )
        )

    out.sort(key=lambda x: (-x.days, x.full_name.casefold()))
    return out


def period_counts(
    sessions: Iterable[AttendanceSession],
    workers: Iterable[Worker],
    year: int,
    month: int,
) -> list[dict]:
    """Attendance days per worker split into days 1-15 and 16-end of a month."""
    sessions = list(sessions)
    workers = list(workers)

    first = count_attendance_days(sessions, workers, *first_half(year, month))
    second = count_attendance_days(sessions, workers, *second_half(year, month))

    rows: dict[str, dict] = {}
    for period, counts in (("period1", first), ("period2", second)):
        for c in counts:
            row = rows.setdefault(
                c.worker_id,
                {"workerId": c.worker_id, "opsId": c.ops_id, "fullName": c.full_name, "period1": 0, "period2": 0},
            )
            row[period] = c.days

    out = list(rows.values())
    out.sort(key=lambda r: (-(r["period1"] + r["period2"]), r["fullName"].casefold()))
    return out
