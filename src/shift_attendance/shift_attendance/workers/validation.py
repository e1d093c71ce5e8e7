from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.validators import require_choice, require_non_empty
from ..core.enums import Department, WorkerStatus
from .model import WorkerDraft


def validate_draft(data: Mapping[str, Any], *, default_status: Optional[WorkerStatus] = WorkerStatus.ACTIVE) -> WorkerDraft:
    """Validate a worker payload (camelCase keys, as in the spreadsheet template).

    With `default_status=None` the status field is required.
    """
    status = data.get("status")
    if not status and default_status is not None:
        status = default_status.value

    return WorkerDraft(
        ops_id=require_non_empty(data.get("opsId"), "OpsID"),
        full_name=require_non_empty(data.get("fullName"), "Full name"),
        nik=require_non_empty(data.get("nik"), "NIK"),
        phone=require_non_empty(data.get("phone"), "Phone"),
        department=require_choice(data.get("department"), Department, "Department"),
        status=require_choice(status, WorkerStatus, "Status"),
    )
