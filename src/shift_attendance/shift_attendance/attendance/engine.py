from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Protocol

from ..common.datetime_utils import split_remaining
from ..core.constants import AUTO_CHECKOUT_WINDOW
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCompletedToday,
    CooldownActive,
    DepartmentNotAllowed,
    DuplicateInSession,
    NotFoundOrIneligible,
)
from ..workers.model import Worker, ops_key
from .divisions import allowed_departments
from .model import AttendanceRecord, BufferedRecord
from .session import OpenSession

logger = logging.getLogger(__name__)


class HistoryLookup(Protocol):
    """Read access to a worker's persisted attendance, supplied by the caller."""

    def get_open_record(self, worker_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_last_closed_record(self, worker_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError


@dataclass(frozen=True)
class AutoCheckout:
    """A stale open record to close at check-in + window before admitting."""

    record_id: int
    checkout_timestamp: datetime


@dataclass(frozen=True)
class Admission:
    worker: Worker
    entry: BufferedRecord
    auto_checkout: Optional[AutoCheckout] = None


class ReconciliationEngine:
    """Decides whether a scan may enter the open session.

    Checks run in a fixed order and the first failing one is raised. The
    engine never writes: an auto-checkout is returned for the caller to apply.
    """

    def __init__(self, *, window: timedelta = AUTO_CHECKOUT_WINDOW):
        self._window = window

    def resolve_worker(self, scan_input: str, workers: Iterable[Worker]) -> Worker:
        key = ops_key(scan_input or "")
        if not key:
            raise NotFoundOrIneligible("Scan an OpsID first.")

        matches = [w for w in workers if ops_key(w.ops_id) == key and w.is_active]
        if not matches:
            raise NotFoundOrIneligible(f'Worker with OpsID "{scan_input.strip()}" not found or is inactive.')
        if len(matches) > 1:
            logger.warning("OpsID %r matches %d active workers; using the first", scan_input, len(matches))
        return matches[0]

    def admit(
        self,
        scan_input: str,
        *,
        workers: Iterable[Worker],
        session: OpenSession,
        history: HistoryLookup,
        now: datetime,
    ) -> Admission:
        worker = self.resolve_worker(scan_input, workers)

        auto_checkout = self._check_open_record(worker, history.get_open_record(worker.worker_id), now)

        last_closed = history.get_last_closed_record(worker.worker_id)
        if last_closed is not None and last_closed.checkout_timestamp is not None:
            self._check_last_checkout(worker, last_closed.checkout_timestamp, now)

        self._check_division(worker, session.descriptor.division)

        if session.contains(worker.ops_id):
            raise DuplicateInSession(f"Worker {worker.full_name} has already been scanned in this session.")

        entry = BufferedRecord(
            worker_id=worker.worker_id,
            ops_id=worker.ops_id,
            full_name=worker.full_name,
            timestamp=now,
        )
        return Admission(worker=worker, entry=entry, auto_checkout=auto_checkout)

    def _check_open_record(
        self, worker: Worker, open_record: Optional[AttendanceRecord], now: datetime
    ) -> Optional[AutoCheckout]:
        if open_record is None:
            return None
        if now - open_record.timestamp > self._window:
            return AutoCheckout(
                record_id=open_record.record_id,
                checkout_timestamp=open_record.timestamp + self._window,
            )
        raise AlreadyCheckedIn(f"Worker {worker.full_name} is already checked in and has not checked out yet.")

    def _check_last_checkout(self, worker: Worker, last_checkout: datetime, now: datetime) -> None:
        if last_checkout.date() == now.date():
            raise AlreadyCompletedToday(f"Worker {worker.full_name} has already completed a shift today.")

        elapsed = now - last_checkout
        if elapsed < self._window:
            hours_left, minutes_left = split_remaining(self._window - elapsed)
            raise CooldownActive(
                f"Worker {worker.full_name} is in a cooldown period for another {hours_left}h {minutes_left}m.",
                hours_left=hours_left,
                minutes_left=minutes_left,
            )

    def _check_division(self, worker: Worker, division: str) -> None:
        allowed = allowed_departments(division)
        if allowed is not None and worker.department not in allowed:
            raise DepartmentNotAllowed(
                f"Worker {worker.full_name} ({worker.department.value}) is not allowed in {division} division."
            )
