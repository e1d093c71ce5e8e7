"""Read-time state derived from persisted records.

All functions are pure: the same record and the same `now` always give the
same result.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import format_hours_minutes
from ..core.constants import AUTO_CHECKOUT_WINDOW, NO_DURATION, UNKNOWN_NAME, UNKNOWN_OPS_ID
from ..core.enums import Fulfillment, ManualStatus
from .model import AttendanceRecord, AttendanceSession

TAKE_OUT = "Take Out"
ON_PLAN = "On Plan"


@dataclass(frozen=True)
class EffectiveCheckout:
    timestamp: datetime
    is_auto: bool = False


def effective_checkout(
    record: AttendanceRecord,
    now: datetime,
    *,
    window: timedelta = AUTO_CHECKOUT_WINDOW,
) -> Optional[EffectiveCheckout]:
    if record.checkout_timestamp is not None:
        return EffectiveCheckout(record.checkout_timestamp)
    if now - record.timestamp > window:
        return EffectiveCheckout(record.timestamp + window, is_auto=True)
    return None


def work_duration(
    checkin: datetime,
    checkout: Optional[datetime],
    *,
    window: timedelta = AUTO_CHECKOUT_WINDOW,
) -> str:
    """Worked time capped at the auto-checkout window, as 'Hh Mm'."""
    if checkout is None or checkout < checkin:
        return NO_DURATION
    return format_hours_minutes(min(checkout - checkin, window))


def status_label(record: AttendanceRecord) -> str:
    if record.is_takeout:
        return TAKE_OUT
    if record.manual_status == ManualStatus.PARTIAL:
        return ManualStatus.PARTIAL.value
    if record.manual_status == ManualStatus.BUFFER:
        return ManualStatus.BUFFER.value
    return ON_PLAN


def fulfillment(planned: int, actual: int) -> Fulfillment:
    if actual < planned:
        return Fulfillment.GAP
    if actual == planned:
        return Fulfillment.FULL_FILL
    return Fulfillment.FULL_FILL_BUFFER


def session_fulfillment(session: AttendanceSession) -> Fulfillment:
    return fulfillment(session.plan_mpp, session.actual)


def mpp_counter(planned: int, actual: int) -> str:
    """Remaining headcount against plan; '+N' once the plan is exceeded."""
    remaining = planned - actual
    if remaining < 0:
        return f"+{abs(remaining)}"
    return str(remaining)


def record_view(
    record: AttendanceRecord,
    now: datetime,
    *,
    window: timedelta = AUTO_CHECKOUT_WINDOW,
) -> dict:
    checkout = effective_checkout(record, now, window=window)
    return {
        "id": record.record_id,
        "sessionId": record.session_id,
        "workerId": record.worker_id,
        "opsId": record.ops_id or UNKNOWN_OPS_ID,
        "fullName": record.full_name or UNKNOWN_NAME,
        "timestamp": record.timestamp.isoformat(timespec="seconds"),
        "checkoutTimestamp": checkout.timestamp.isoformat(timespec="seconds") if checkout else None,
        "autoCheckout": bool(checkout and checkout.is_auto),
        "workDuration": work_duration(record.timestamp, checkout.timestamp if checkout else None, window=window),
        "manualStatus": record.manual_status.value if record.manual_status else None,
        "isTakeout": record.is_takeout,
        "status": status_label(record),
    }


def session_view(
    session: AttendanceSession,
    now: datetime,
    *,
    window: timedelta = AUTO_CHECKOUT_WINDOW,
) -> dict:
    return {
        "id": session.session_id,
        "date": session.date.isoformat(),
        "division": session.division,
        "shiftTime": session.shift_time,
        "shiftId": session.shift_id,
        "planMpp": session.plan_mpp,
        "actual": session.actual,
        "fulfillment": session_fulfillment(session).value,
        "records": [record_view(r, now, window=window) for r in session.records],
    }
