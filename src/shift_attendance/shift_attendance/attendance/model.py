from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ManualStatus


@dataclass(frozen=True)
class SessionDescriptor:
    """What an operator enters when opening a session."""

    date: date
    division: str
    shift_time: str
    shift_id: str
    plan_mpp: int


@dataclass(frozen=True)
class BufferedRecord:
    """A scan held in memory until the open session ends."""

    worker_id: str
    ops_id: str
    full_name: str
    timestamp: datetime


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one worker's presence within a persisted session."""

    record_id: int
    session_id: str
    worker_id: str
    timestamp: datetime
    checkout_timestamp: Optional[datetime] = None
    manual_status: Optional[ManualStatus] = None
    is_takeout: bool = False
    ops_id: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.checkout_timestamp is None


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: a finalized shift slot with its records."""

    session_id: str
    date: date
    division: str
    shift_time: str
    shift_id: str
    plan_mpp: int
    records: tuple[AttendanceRecord, ...] = field(default_factory=tuple)

    @property
    def descriptor(self) -> SessionDescriptor:
        return SessionDescriptor(
            date=self.date,
            division=self.division,
            shift_time=self.shift_time,
            shift_id=self.shift_id,
            plan_mpp=self.plan_mpp,
        )

    @property
    def actual(self) -> int:
        """Headcount: takeout records never count."""
        return sum(1 for r in self.records if not r.is_takeout)
