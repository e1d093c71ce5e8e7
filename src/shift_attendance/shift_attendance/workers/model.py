from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import CONTRACT_TYPE
from ..core.enums import Department, WorkerStatus


def ops_key(ops_id: str) -> str:
    """Scanning key: ops ids compare case-insensitively, the same way as LOWER() in MySQL."""
    return ops_id.strip().lower()


@dataclass(frozen=True)
class Worker:
    """Domain entity: a registered daily worker."""

    worker_id: str
    ops_id: str
    full_name: str
    nik: str
    phone: str
    department: Department
    status: WorkerStatus
    created_at: datetime
    contract_type: str = CONTRACT_TYPE

    @property
    def is_active(self) -> bool:
        return self.status == WorkerStatus.ACTIVE

    def to_row(self) -> dict:
        """Flat row shape shared with the spreadsheet and JSON collaborators."""
        return {
            "id": self.worker_id,
            "opsId": self.ops_id,
            "fullName": self.full_name,
            "nik": self.nik,
            "phone": self.phone,
            "contractType": self.contract_type,
            "department": self.department.value,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class WorkerDraft:
    """Validated worker fields before an id and creation time are assigned."""

    ops_id: str
    full_name: str
    nik: str
    phone: str
    department: Department
    status: WorkerStatus
