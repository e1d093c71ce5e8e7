from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from itertools import count

import pytest

from src.shift_attendance.shift_attendance.attendance.model import (
    AttendanceRecord,
    AttendanceSession,
    SessionDescriptor,
)
from src.shift_attendance.shift_attendance.core.enums import Department, WorkerStatus
from src.shift_attendance.shift_attendance.workers.model import Worker, ops_key


class FakeWorkerRepo:
    def __init__(self, workers=()):
        self._rows = {w.worker_id: w for w in workers}

    def get_by_id(self, worker_id):
        return self._rows.get(worker_id)

    def get_by_ops_id(self, ops_id):
        key = ops_key(ops_id)
        return next((w for w in self._rows.values() if ops_key(w.ops_id) == key), None)

    def list_all(self):
        return sorted(self._rows.values(), key=lambda w: w.created_at, reverse=True)

    def create(self, worker):
        self._rows[worker.worker_id] = worker

    def create_many(self, workers):
        for w in workers:
            self.create(w)
        return len(workers)

    def update(self, worker):
        if worker.worker_id not in self._rows:
            return False
        self._rows[worker.worker_id] = worker
        return True

    def delete_by_id(self, worker_id):
        return self._rows.pop(worker_id, None) is not None


class FakeAttendanceRepo:
    def __init__(self):
        self._sessions = {}
        self._records = {}
        self._ids = count(1)

    # test setup helpers

    def add_session(self, session_id, descriptor):
        self._sessions[session_id] = descriptor

    def add_record(self, session_id, worker, timestamp, **fields):
        record = AttendanceRecord(
            record_id=next(self._ids),
            session_id=session_id,
            worker_id=worker.worker_id,
            timestamp=timestamp,
            ops_id=worker.ops_id,
            full_name=worker.full_name,
            **fields,
        )
        self._records[record.record_id] = record
        return record

    # repository protocol

    def get_open_record(self, worker_id):
        open_records = [r for r in self._records.values() if r.worker_id == worker_id and r.is_open]
        return max(open_records, key=lambda r: r.timestamp, default=None)

    def get_last_closed_record(self, worker_id):
        closed = [r for r in self._records.values() if r.worker_id == worker_id and not r.is_open]
        return max(closed, key=lambda r: r.checkout_timestamp, default=None)

    def _build(self, session_id):
        d = self._sessions[session_id]
        records = sorted(
            (r for r in self._records.values() if r.session_id == session_id), key=lambda r: r.timestamp
        )
        return AttendanceSession(
            session_id=session_id,
            date=d.date,
            division=d.division,
            shift_time=d.shift_time,
            shift_id=d.shift_id,
            plan_mpp=d.plan_mpp,
            records=tuple(records),
        )

    def list_sessions(self):
        sessions = [self._build(sid) for sid in self._sessions]
        return sorted(sessions, key=lambda s: s.date, reverse=True)

    def get_session(self, session_id):
        return self._build(session_id) if session_id in self._sessions else None

    def get_record(self, record_id):
        return self._records.get(record_id)

    def save_session_with_records(self, *, session_id, descriptor, entries):
        self._sessions[session_id] = descriptor
        for entry in entries:
            self.insert_record(session_id=session_id, entry=entry, manual_status=None)

    def insert_record(self, *, session_id, entry, manual_status):
        record = AttendanceRecord(
            record_id=next(self._ids),
            session_id=session_id,
            worker_id=entry.worker_id,
            timestamp=entry.timestamp,
            manual_status=manual_status,
            ops_id=entry.ops_id,
            full_name=entry.full_name,
        )
        self._records[record.record_id] = record
        return record.record_id

    def _update(self, record_id, **changes):
        if record_id not in self._records:
            return False
        self._records[record_id] = replace(self._records[record_id], **changes)
        return True

    def set_checkout(self, record_id, checkout_timestamp):
        return self._update(record_id, checkout_timestamp=checkout_timestamp)

    def set_takeout(self, record_id, is_takeout):
        return self._update(record_id, is_takeout=is_takeout)

    def set_manual_status(self, record_id, manual_status):
        return self._update(record_id, manual_status=manual_status)

    def delete_record(self, record_id):
        return self._records.pop(record_id, None) is not None

    def delete_worker_records(self, *, session_id, worker_id):
        doomed = [rid for rid, r in self._records.items() if r.session_id == session_id and r.worker_id == worker_id]
        for rid in doomed:
            del self._records[rid]
        return len(doomed)

    def delete_session(self, session_id):
        if self._sessions.pop(session_id, None) is None:
            return False
        for rid in [rid for rid, r in self._records.items() if r.session_id == session_id]:
            del self._records[rid]
        return True


def _make_worker(
    ops_id,
    full_name=None,
    *,
    department=Department.SOC_OPERATOR,
    status=WorkerStatus.ACTIVE,
    worker_id=None,
    created_at=datetime(2024, 1, 1, 8, 0),
):
    return Worker(
        worker_id=worker_id or f"w-{ops_id.lower()}",
        ops_id=ops_id,
        full_name=full_name or f"Worker {ops_id}",
        nik="3171000000000000",
        phone="081200000000",
        department=department,
        status=status,
        created_at=created_at,
    )


def _make_descriptor(day=date(2024, 3, 10), division="ASM2", plan_mpp=2):
    return SessionDescriptor(
        date=day,
        division=division,
        shift_time="07:00 - 16:00",
        shift_id="SOCSTROPS0716 Shift 07 07:00 - 19:00",
        plan_mpp=plan_mpp,
    )


@pytest.fixture
def make_worker():
    return _make_worker


@pytest.fixture
def make_descriptor():
    return _make_descriptor


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def worker_repo():
    return FakeWorkerRepo()
