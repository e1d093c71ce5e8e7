from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Department, WorkerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..database.rows import as_datetime, as_enum, as_str
from .model import Worker, ops_key
from .repository import WorkerRepository

_COLUMNS = "id, ops_id, full_name, nik, phone, contract_type, department, status, created_at"


def worker_from_row(row: Mapping[str, Any]) -> Worker:
    return Worker(
        worker_id=as_str(row, "id"),
        ops_id=as_str(row, "ops_id"),
        full_name=as_str(row, "full_name"),
        nik=as_str(row, "nik"),
        phone=as_str(row, "phone"),
        contract_type=as_str(row, "contract_type"),
        department=as_enum(row, "department", Department),
        status=as_enum(row, "status", WorkerStatus),
        created_at=as_datetime(row, "created_at"),
    )


def _params(w: Worker) -> tuple:
    return (
        w.worker_id,
        w.ops_id,
        w.full_name,
        w.nik,
        w.phone,
        w.contract_type,
        w.department.value,
        w.status.value,
        w.created_at,
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE id=%s", (worker_id,))
            row = fetchone(cur)
            return worker_from_row(row) if row else None

    def get_by_ops_id(self, ops_id: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM workers WHERE LOWER(ops_id)=%s ORDER BY created_at ASC LIMIT 1",
                (ops_key(ops_id),),
            )
            row = fetchone(cur)
            return worker_from_row(row) if row else None

    def list_all(self) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers ORDER BY created_at DESC")
            return [worker_from_row(r) for r in fetchall(cur)]

    def create(self, worker: Worker) -> None:
        self.create_many([worker])

    def create_many(self, workers: Sequence[Worker]) -> int:
        if not workers:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"""
                INSERT INTO workers({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [_params(w) for w in workers],
            )
            return len(workers)

    def update(self, worker: Worker) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE workers
                SET ops_id=%s, full_name=%s, nik=%s, phone=%s, contract_type=%s, department=%s, status=%s
                WHERE id=%s
                """,
                (
                    worker.ops_id,
                    worker.full_name,
                    worker.nik,
                    worker.phone,
                    worker.contract_type,
                    worker.department.value,
                    worker.status.value,
                    worker.worker_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, worker_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM workers WHERE id=%s", (worker_id,))
            return cur.rowcount > 0
