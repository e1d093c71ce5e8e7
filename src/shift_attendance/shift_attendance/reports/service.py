from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional

from ..attendance.model import AttendanceSession
from ..attendance.repository import AttendanceRepository
from ..attendance.status import effective_checkout, status_label, work_duration
from ..common.datetime_utils import first_half, month_window, now_local, second_half, week_window
from ..core.constants import AUTO_CHECKOUT_WINDOW, UNKNOWN_NAME, UNKNOWN_OPS_ID
from ..core.exceptions import ValidationError
from ..workers.repository import WorkerRepository
from .aggregator import count_attendance_days, period_counts


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _in(session: AttendanceSession, window: tuple[date, date]) -> bool:
    return window[0] <= session.date <= window[1]


def fulfillment_rate(sessions: Iterable[AttendanceSession]) -> str:
    """Actual over planned headcount for a set of sessions, as a percentage."""
    sessions = list(sessions)
    if not sessions:
        return "0%"
    planned = sum(s.plan_mpp for s in sessions)
    if planned == 0:
        return "N/A"
    actual = sum(s.actual for s in sessions)
    return f"{actual / planned * 100:.1f}%"


class ReportService:
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

    def dashboard(self, *, today: Optional[date] = None) -> dict:
        today = today or self._clock().date()
        sessions = self._attendance.list_sessions()

        week = week_window(today)
        month = month_window(today.year, today.month)
        period1 = first_half(today.year, today.month)
        period2 = second_half(today.year, today.month)

        def attended(window: tuple[date, date]) -> int:
            return sum(s.actual for s in sessions if _in(s, window))

        return {
            "date": today.isoformat(),
            "activeWorkers": sum(1 for w in self._workers.list_all() if w.is_active),
            "counts": {
                "today": attended((today, today)),
                "thisWeek": attended(week),
                "thisMonth": attended(month),
                "period1": attended(period1),
                "period2": attended(period2),
            },
            "fulfillment": {
                "period1": fulfillment_rate(s for s in sessions if _in(s, period1)),
                "period2": fulfillment_rate(s for s in sessions if _in(s, period2)),
            },
        }

    def attendance_days(self, *, start: Optional[date] = None, end: Optional[date] = None) -> list[dict]:
        """Per-worker attendance days in [start, end]; defaults to the current month."""
        if start is None or end is None:
            today = self._clock().date()
            month = month_window(today.year, today.month)
            start = start or month[0]
            end = end or month[1]
        if start > end:
            raise ValidationError("Start date must not be after end date")
        counts = count_attendance_days(self._attendance.list_sessions(), self._workers.list_all(), start, end)
        return [
            {"worker_id": c.worker_id, "ops_id": c.ops_id, "full_name": c.full_name, "days": c.days}
            for c in counts
        ]

    def period_report(self, *, year: Optional[int] = None, month: Optional[int] = None) -> list[dict]:
        today = self._clock().date()
        year = year or today.year
        month = month or today.month
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        return period_counts(self._attendance.list_sessions(), self._workers.list_all(), year, month)

    def build_history_report(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> ReportData:
        """Flat record rows for export plus per-worker attendance days over the same range."""
        now = now or self._clock()
        sessions = [
            s
            for s in self._attendance.list_sessions()
            if (start is None or s.date >= start) and (end is None or s.date <= end)
        ]

        rows: list[dict] = []
        for s in sessions:
            for r in s.records:
                checkout = effective_checkout(r, now, window=self._window)
                rows.append(
                    {
                        "date": s.date.isoformat(),
                        "division": s.division,
                        "shift_time": s.shift_time,
                        "shift_id": s.shift_id,
                        "ops_id": r.ops_id or UNKNOWN_OPS_ID,
                        "full_name": r.full_name or UNKNOWN_NAME,
                        "check_in": r.timestamp.strftime("%H:%M:%S"),
                        "check_out": checkout.timestamp.strftime("%H:%M:%S") if checkout else "-",
                        "work_duration": work_duration(
                            r.timestamp, checkout.timestamp if checkout else None, window=self._window
                        ),
                        "status": status_label(r),
                    }
                )

        if sessions:
            lo = start or min(s.date for s in sessions)
            hi = end or max(s.date for s in sessions)
            counts = count_attendance_days(sessions, self._workers.list_all(), lo, hi)
        else:
            counts = []

        summary = [{"worker_id": c.worker_id, "ops_id": c.ops_id, "full_name": c.full_name, "days": c.days} for c in counts]
        return ReportData(rows=rows, summary=summary)
