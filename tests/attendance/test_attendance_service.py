from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.shift_attendance.shift_attendance.attendance.service import AttendanceService
from src.shift_attendance.shift_attendance.core.enums import ManualStatus
from src.shift_attendance.shift_attendance.core.exceptions import DuplicateInSession, NotFoundError, ValidationError

NOW = datetime(2024, 3, 10, 12, 0)
CHECKIN = datetime(2024, 3, 10, 7, 0)


@pytest.fixture
def budi(make_worker, worker_repo):
    worker = make_worker("OPS001", "Budi")
    worker_repo.create(worker)
    return worker


@pytest.fixture
def siti(make_worker, worker_repo):
    worker = make_worker("OPS002", "Siti")
    worker_repo.create(worker)
    return worker


@pytest.fixture
def service(attendance_repo, worker_repo):
    return AttendanceService(attendance_repo, worker_repo, clock=lambda: NOW)


@pytest.fixture
def session_id(attendance_repo, make_descriptor):
    attendance_repo.add_session("s1", make_descriptor())
    return "s1"


def test_manual_add_inserts_record_with_status(service, attendance_repo, session_id, budi):
    record = service.manual_add(session_id, "ops001", manual_status="Buffer")

    assert record.manual_status is ManualStatus.BUFFER
    assert record.timestamp == NOW
    stored = attendance_repo.get_session(session_id).records
    assert [(r.worker_id, r.manual_status) for r in stored] == [(budi.worker_id, ManualStatus.BUFFER)]


def test_manual_add_rejects_duplicate_worker(service, attendance_repo, session_id, budi):
    attendance_repo.add_record(session_id, budi, CHECKIN)

    with pytest.raises(DuplicateInSession):
        service.manual_add(session_id, "OPS001")


def test_manual_add_unknown_worker_or_session(service, session_id, budi):
    with pytest.raises(NotFoundError):
        service.manual_add(session_id, "OPS999")
    with pytest.raises(NotFoundError):
        service.manual_add("missing", "OPS001")


def test_manual_add_rejects_bad_status(service, session_id, budi):
    with pytest.raises(ValidationError):
        service.manual_add(session_id, "OPS001", manual_status="Overtime")


def test_checkout_closes_open_record(service, attendance_repo, session_id, budi):
    record = attendance_repo.add_record(session_id, budi, CHECKIN)

    closed = service.checkout(record.record_id)

    assert closed.checkout_timestamp == NOW
    assert attendance_repo.get_record(record.record_id).checkout_timestamp == NOW


def test_checkout_rules(service, attendance_repo, session_id, budi, siti):
    closed = attendance_repo.add_record(session_id, budi, CHECKIN, checkout_timestamp=CHECKIN + timedelta(hours=8))
    open_record = attendance_repo.add_record(session_id, siti, CHECKIN)

    with pytest.raises(ValidationError):
        service.checkout(closed.record_id)
    with pytest.raises(ValidationError):
        service.checkout(open_record.record_id, at=CHECKIN - timedelta(minutes=5))
    with pytest.raises(NotFoundError):
        service.checkout(999)


def test_takeout_and_manual_status(service, attendance_repo, session_id, budi):
    record = attendance_repo.add_record(session_id, budi, CHECKIN)

    assert service.set_takeout(record.record_id, True).is_takeout is True
    assert attendance_repo.get_session(session_id).actual == 0

    assert service.set_manual_status(record.record_id, "Partial").manual_status is ManualStatus.PARTIAL
    assert service.set_manual_status(record.record_id, None).manual_status is None
    assert attendance_repo.get_record(record.record_id).manual_status is None


def test_remove_worker_from_session(service, attendance_repo, session_id, budi, siti):
    attendance_repo.add_record(session_id, budi, CHECKIN)
    attendance_repo.add_record(session_id, siti, CHECKIN)

    service.remove_worker_from_session(session_id, budi.worker_id)

    assert [r.worker_id for r in attendance_repo.get_session(session_id).records] == [siti.worker_id]
    with pytest.raises(NotFoundError):
        service.remove_worker_from_session(session_id, budi.worker_id)


def test_delete_record_and_session(service, attendance_repo, session_id, budi, siti):
    first = attendance_repo.add_record(session_id, budi, CHECKIN)
    attendance_repo.add_record(session_id, siti, CHECKIN)

    service.delete_record(first.record_id)
    assert len(attendance_repo.get_session(session_id).records) == 1

    service.delete_session(session_id)
    assert attendance_repo.get_session(session_id) is None
    with pytest.raises(NotFoundError):
        service.delete_session(session_id)


def test_history_views_newest_first(service, attendance_repo, make_descriptor, budi):
    attendance_repo.add_session("old", make_descriptor(day=date(2024, 3, 1)))
    attendance_repo.add_session("new", make_descriptor(day=date(2024, 3, 9)))
    attendance_repo.add_record("new", budi, datetime(2024, 3, 9, 7, 0))

    views = service.history_views()

    assert [v["id"] for v in views] == ["new", "old"]
    assert views[0]["records"][0]["autoCheckout"] is True
    assert views[1]["fulfillment"] == "GAP"


def test_manual_add_and_checkout_drop_fractional_seconds(service, session_id, budi):
    record = service.manual_add(session_id, "OPS001", now=datetime(2024, 3, 10, 23, 59, 59, 700000))
    assert record.timestamp == datetime(2024, 3, 10, 23, 59, 59)

    closed = service.checkout(record.record_id, at=datetime(2024, 3, 11, 8, 0, 0, 999999))
    assert closed.checkout_timestamp == datetime(2024, 3, 11, 8, 0, 0)
