from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import ManualStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..database.rows import (
    as_bool,
    as_date,
    as_datetime,
    as_int,
    as_optional_datetime,
    as_optional_enum,
    as_optional_str,
    as_str,
)
from .model import AttendanceRecord, AttendanceSession, BufferedRecord, SessionDescriptor
from .repository import AttendanceRepository

# Denormalised names win; the live registry fills rows written before they existed.
_RECORD_SELECT = """
    SELECT r.id, r.session_id, r.worker_id, r.timestamp, r.checkout_timestamp,
           r.manual_status, r.is_takeout,
           COALESCE(r.ops_id, w.ops_id) AS ops_id,
           COALESCE(r.full_name, w.full_name) AS full_name
    FROM attendance_records r
    LEFT JOIN workers w ON w.id = r.worker_id
"""

_SESSION_COLUMNS = "id, date, division, shift_time, shift_id, plan_mpp"


def record_from_row(row: Mapping[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=as_int(row, "id"),
        session_id=as_str(row, "session_id"),
        worker_id=as_str(row, "worker_id"),
        timestamp=as_datetime(row, "timestamp"),
        checkout_timestamp=as_optional_datetime(row, "checkout_timestamp"),
        manual_status=as_optional_enum(row, "manual_status", ManualStatus),
        is_takeout=as_bool(row, "is_takeout"),
        ops_id=as_optional_str(row, "ops_id"),
        full_name=as_optional_str(row, "full_name"),
    )


def session_from_row(row: Mapping[str, Any], records: Sequence[AttendanceRecord] = ()) -> AttendanceSession:
    return AttendanceSession(
        session_id=as_str(row, "id"),
        date=as_date(row, "date"),
        division=as_str(row, "division"),
        shift_time=as_str(row, "shift_time"),
        shift_id=as_str(row, "shift_id"),
        plan_mpp=as_int(row, "plan_mpp"),
        records=tuple(records),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_open_record(self, worker_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _RECORD_SELECT
                + """
                WHERE r.worker_id=%s AND r.checkout_timestamp IS NULL
                ORDER BY r.timestamp DESC
                LIMIT 1
                """,
                (worker_id,),
            )
            row = fetchone(cur)
            return record_from_row(row) if row else None

    def get_last_closed_record(self, worker_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _RECORD_SELECT
                + """
                WHERE r.worker_id=%s AND r.checkout_timestamp IS NOT NULL
                ORDER BY r.checkout_timestamp DESC
                LIMIT 1
                """,
                (worker_id,),
            )
            row = fetchone(cur)
            return record_from_row(row) if row else None

    def list_sessions(self) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions ORDER BY date DESC, created_at DESC")
            session_rows = fetchall(cur)
            cur.execute(_RECORD_SELECT + " ORDER BY r.timestamp ASC")
            by_session: dict[str, list[AttendanceRecord]] = defaultdict(list)
            for row in fetchall(cur):
                record = record_from_row(row)
                by_session[record.session_id].append(record)

        return [session_from_row(s, by_session.get(str(s["id"]), ())) for s in session_rows]

    def get_session(self, session_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions WHERE id=%s", (session_id,))
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(_RECORD_SELECT + " WHERE r.session_id=%s ORDER BY r.timestamp ASC", (session_id,))
            records = [record_from_row(r) for r in fetchall(cur)]
            return session_from_row(row, records)

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_RECORD_SELECT + " WHERE r.id=%s", (int(record_id),))
            row = fetchone(cur)
            return record_from_row(row) if row else None

    def save_session_with_records(
        self,
        *,
        session_id: str,
        descriptor: SessionDescriptor,
        entries: Sequence[BufferedRecord],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_sessions({_SESSION_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    session_id,
                    descriptor.date,
                    descriptor.division,
                    descriptor.shift_time,
                    descriptor.shift_id,
                    descriptor.plan_mpp,
                ),
            )
            cur.executemany(
                """
                INSERT INTO attendance_records(session_id, worker_id, ops_id, full_name, timestamp)
                VALUES(%s,%s,%s,%s,%s)
                """,
                [(session_id, e.worker_id, e.ops_id, e.full_name, e.timestamp) for e in entries],
            )

    def insert_record(
        self,
        *,
        session_id: str,
        entry: BufferedRecord,
        manual_status: Optional[ManualStatus] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(session_id, worker_id, ops_id, full_name, timestamp, manual_status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    session_id,
                    entry.worker_id,
                    entry.ops_id,
                    entry.full_name,
                    entry.timestamp,
                    manual_status.value if manual_status else None,
                ),
            )
            return int(cur.lastrowid)

    def _update_one(self, sql: str, params: tuple) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return cur.rowcount > 0

    def set_checkout(self, record_id: int, checkout_timestamp: datetime) -> bool:
        return self._update_one(
            "UPDATE attendance_records SET checkout_timestamp=%s WHERE id=%s",
            (checkout_timestamp, int(record_id)),
        )

    def set_takeout(self, record_id: int, is_takeout: bool) -> bool:
        return self._update_one(
            "UPDATE attendance_records SET is_takeout=%s WHERE id=%s",
            (1 if is_takeout else 0, int(record_id)),
        )

    def set_manual_status(self, record_id: int, manual_status: Optional[ManualStatus]) -> bool:
        return self._update_one(
            "UPDATE attendance_records SET manual_status=%s WHERE id=%s",
            (manual_status.value if manual_status else None, int(record_id)),
        )

    def delete_record(self, record_id: int) -> bool:
        return self._update_one("DELETE FROM attendance_records WHERE id=%s", (int(record_id),))

    def delete_worker_records(self, *, session_id: str, worker_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE session_id=%s AND worker_id=%s",
                (session_id, worker_id),
            )
            return int(cur.rowcount)

    def delete_session(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE session_id=%s", (session_id,))
            cur.execute("DELETE FROM attendance_sessions WHERE id=%s", (session_id,))
            return cur.rowcount > 0

