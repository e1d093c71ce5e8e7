from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import require_choice, require_non_empty, require_positive_int
from ..core.constants import AUTO_CHECKOUT_WINDOW
from ..core.enums import ManualStatus
from ..core.exceptions import DuplicateInSession, NotFoundError, ValidationError
from ..workers.repository import WorkerRepository
from .divisions import DIVISIONS
from .engine import ReconciliationEngine
from .model import AttendanceRecord, AttendanceSession, BufferedRecord, SessionDescriptor
from .repository import AttendanceRepository
from .session import OpenSession
from .status import record_view, session_view

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


def _whole_seconds(value: datetime) -> datetime:
    # DATETIME columns round fractions, which can push 23:59:59.6 into the next day.
    return value.replace(microsecond=0)


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(require_non_empty(value, "Date"))
    except ValueError:
        raise ValidationError("Date must be YYYY-MM-DD")


def _as_manual_status(value: Any) -> Optional[ManualStatus]:
    if value is None or value == "":
        return None
    if isinstance(value, ManualStatus):
        return value
    return require_choice(value, ManualStatus, "Manual status")


class SessionManager:
    """Use case: run one open attendance session from start to end.

    Each instance owns at most one open session; the scan buffer lives only
    here until `end()` persists it. One instance serves every request, so
    operations that touch the buffer run under a lock.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        *,
        engine: Optional[ReconciliationEngine] = None,
        clock: Callable[[], datetime] = now_local,
        id_factory: Callable[[], str] = _new_id,
    ):
        self._attendance = attendance
        self._workers = workers
        self._engine = engine or ReconciliationEngine()
        self._clock = clock
        self._new_id = id_factory
        self._current: Optional[OpenSession] = None
        self._lock = threading.RLock()

    @property
    def current(self) -> Optional[OpenSession]:
        return self._current

    def _require_open(self) -> OpenSession:
        if self._current is None:
            raise ValidationError("No attendance session is open")
        return self._current

    def start(
        self,
        *,
        session_date: Any,
        division: str,
        shift_time: str,
        shift_id: str,
        plan_mpp: Any,
    ) -> OpenSession:
        division = require_non_empty(division, "Division")
        if division not in DIVISIONS:
            raise ValidationError(f"Unknown division: {division}")

        descriptor = SessionDescriptor(
            date=_as_date(session_date),
            division=division,
            shift_time=require_non_empty(shift_time, "Shift time"),
            shift_id=require_non_empty(shift_id, "Shift ID"),
            plan_mpp=require_positive_int(plan_mpp, "Plan MPP"),
        )

        with self._lock:
            if self._current is not None:
                raise ValidationError("An attendance session is already open; end or cancel it first")
            session = self._current = OpenSession(descriptor)

        logger.info(
            "session opened: %s %s %s plan=%d",
            descriptor.date.isoformat(),
            descriptor.division,
            descriptor.shift_id,
            descriptor.plan_mpp,
        )
        return session

    def scan(self, ops_id: str, *, now: Optional[datetime] = None) -> BufferedRecord:
        with self._lock:
            session = self._require_open()
            now = _whole_seconds(now or self._clock())

            try:
                admission = self._engine.admit(
                    ops_id,
                    workers=self._workers.list_all(),
                    session=session,
                    history=self._attendance,
                    now=now,
                )
            except ValidationError as e:
                logger.info("scan rejected (%s): %s", type(e).__name__, e)
                raise

            if admission.auto_checkout:
                auto = admission.auto_checkout
                if not self._attendance.set_checkout(auto.record_id, auto.checkout_timestamp):
                    raise ValidationError(f"Could not auto-close stale session for {admission.worker.full_name}")
                logger.info(
                    "auto checkout: record %s of %s closed at %s",
                    auto.record_id,
                    admission.worker.ops_id,
                    auto.checkout_timestamp.isoformat(timespec="seconds"),
                )

            session.add(admission.entry)
            return admission.entry

    def remove(self, worker_id: str) -> None:
        with self._lock:
            session = self._require_open()
            if not session.remove(worker_id):
                raise NotFoundError("Worker is not in the open session")

    def end(self) -> Optional[str]:
        """Persist the open session; returns its id, or None when nothing was scanned.

        If the store fails the buffer is kept so the operator can retry.
        """
        with self._lock:
            session = self._require_open()
            if not len(session):
                self._current = None
                logger.info("session ended with no scans; nothing persisted")
                return None

            session_id = self._new_id()
            self._attendance.save_session_with_records(
                session_id=session_id,
                descriptor=session.descriptor,
                entries=session.entries,
            )
            self._current = None

        logger.info("session %s saved with %d records", session_id, len(session))
        return session_id

    def cancel(self) -> None:
        with self._lock:
            self._require_open()
            self._current = None
        logger.info("open session cancelled")

    def summary(self) -> Optional[dict]:
        session = self._current
        if session is None:
            return None
        d = session.descriptor
        return {
            "date": d.date.isoformat(),
            "division": d.division,
            "shiftTime": d.shift_time,
            "shiftId": d.shift_id,
            "planMpp": d.plan_mpp,
            "actual": len(session),
            "remaining": session.mpp_counter(),
            "fulfillment": session.fulfillment().value,
            "entries": [
                {
                    "workerId": e.worker_id,
                    "opsId": e.ops_id,
                    "fullName": e.full_name,
                    "timestamp": e.timestamp.isoformat(timespec="seconds"),
                }
                for e in session.entries
            ],
        }


class AttendanceService:
    """Use case: review and correct persisted sessions (admin)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        window: timedelta = AUTO_CHECKOUT_WINDOW,
    ):
        self._attendance = attendance
        self._workers = workers
        self._clock = clock
        self._window = window

    def history(self) -> Sequence[AttendanceSession]:
        return self._attendance.list_sessions()

    def history_views(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or self._clock()
        return [session_view(s, now, window=self._window) for s in self.history()]

    def get_session(self, session_id: str) -> AttendanceSession:
        session = self._attendance.get_session(session_id)
        if not session:
            raise NotFoundError("Attendance session not found")
        return session

    def session_view(self, session_id: str, *, now: Optional[datetime] = None) -> dict:
        return session_view(self.get_session(session_id), now or self._clock(), window=self._window)

    def record_view(self, record: AttendanceRecord, *, now: Optional[datetime] = None) -> dict:
        return record_view(record, now or self._clock(), window=self._window)

    def _get_record(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_record(int(record_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def manual_add(
        self,
        session_id: str,
        ops_id: str,
        *,
        manual_status: Any = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        session = self.get_session(session_id)
        status = _as_manual_status(manual_status)

        worker = self._workers.get_by_ops_id(require_non_empty(ops_id, "OpsID"))
        if not worker:
            raise NotFoundError(f'Worker with OpsID "{ops_id.strip()}" not found')
        if any(r.worker_id == worker.worker_id for r in session.records):
            raise DuplicateInSession(f"Worker {worker.full_name} is already recorded in this session.")

        entry = BufferedRecord(
            worker_id=worker.worker_id,
            ops_id=worker.ops_id,
            full_name=worker.full_name,
            timestamp=_whole_seconds(now or self._clock()),
        )
        record_id = self._attendance.insert_record(session_id=session.session_id, entry=entry, manual_status=status)
        logger.info("manual add: %s into session %s", worker.ops_id, session.session_id)
        return AttendanceRecord(
            record_id=record_id,
            session_id=session.session_id,
            worker_id=entry.worker_id,
            timestamp=entry.timestamp,
            manual_status=status,
            ops_id=entry.ops_id,
            full_name=entry.full_name,
        )

    def checkout(self, record_id: int, *, at: Optional[datetime] = None) -> AttendanceRecord:
        record = self._get_record(record_id)
        if record.checkout_timestamp is not None:
            raise ValidationError("Worker has already checked out")

        at = _whole_seconds(at or self._clock())
        if at < record.timestamp:
            raise ValidationError("Checkout cannot be earlier than check-in")

        if not self._attendance.set_checkout(record.record_id, at):
            raise ValidationError("Checkout failed")
        return replace(record, checkout_timestamp=at)

    def set_takeout(self, record_id: int, is_takeout: bool) -> AttendanceRecord:
        record = self._get_record(record_id)
        self._attendance.set_takeout(record.record_id, bool(is_takeout))
        return replace(record, is_takeout=bool(is_takeout))

    def set_manual_status(self, record_id: int, manual_status: Any) -> AttendanceRecord:
        record = self._get_record(record_id)
        status = _as_manual_status(manual_status)
        self._attendance.set_manual_status(record.record_id, status)
        return replace(record, manual_status=status)

    def remove_worker_from_session(self, session_id: str, worker_id: str) -> None:
        self.get_session(session_id)
        if not self._attendance.delete_worker_records(session_id=session_id, worker_id=worker_id):
            raise NotFoundError("Worker has no record in this session")

    def delete_record(self, record_id: int) -> None:
        record = self._get_record(record_id)
        self._attendance.delete_record(record.record_id)

    def delete_session(self, session_id: str) -> None:
        session = self.get_session(session_id)
        if not self._attendance.delete_session(session.session_id):
            raise ValidationError("Failed to delete attendance session")
        logger.info("session %s deleted with %d records", session.session_id, len(session.records))
