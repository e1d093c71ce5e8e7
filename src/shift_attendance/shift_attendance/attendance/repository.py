from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ManualStatus
from .model import AttendanceRecord, AttendanceSession, BufferedRecord, SessionDescriptor


class AttendanceRepository(Protocol):
    def get_open_record(self, worker_id: str) -> Optional[AttendanceRecord]:
        """A record of this worker with no checkout, in any session."""

        raise NotImplementedError

    def get_last_closed_record(self, worker_id: str) -> Optional[AttendanceRecord]:
        """Most recent record of this worker by checkout time."""

        raise NotImplementedError

    def list_sessions(self) -> Sequence[AttendanceSession]:
        """All sessions, newest date first, with their records."""

        raise NotImplementedError

    def get_session(self, session_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def save_session_with_records(
        self,
        *,
        session_id: str,
        descriptor: SessionDescriptor,
        entries: Sequence[BufferedRecord],
    ) -> None:
        """Persist a session and all its records in one transaction."""

        raise NotImplementedError

    def insert_record(
        self,
        *,
        session_id: str,
        entry: BufferedRecord,
        manual_status: Optional[ManualStatus] = None,
    ) -> int:
        raise NotImplementedError

    def set_checkout(self, record_id: int, checkout_timestamp: datetime) -> bool:
        raise NotImplementedError

    def set_takeout(self, record_id: int, is_takeout: bool) -> bool:
        raise NotImplementedError

    def set_manual_status(self, record_id: int, manual_status: Optional[ManualStatus]) -> bool:
        raise NotImplementedError

    def delete_record(self, record_id: int) -> bool:
        raise NotImplementedError

    def delete_worker_records(self, *, session_id: str, worker_id: str) -> int:
        raise NotImplementedError

    def delete_session(self, session_id: str) -> bool:
        """Remove the session and its records in one transaction."""

        raise NotImplementedError
