from __future__ import annotations

import logging
import uuid
from typing import Any, BinaryIO, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import NotFoundError, ValidationError
from .model import Worker, WorkerDraft, ops_key
from .repository import WorkerRepository
from .spreadsheet import ImportResult, parse_import
from .validation import validate_draft

logger = logging.getLogger(__name__)


class WorkerService:
    """Use case: manage the worker registry (admin)."""

    def __init__(
        self,
        workers: WorkerRepository,
        *,
        clock: Callable[[], Any] = now_local,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._workers = workers
        self._clock = clock
        self._new_id = id_factory

    def list_workers(self) -> Sequence[Worker]:
        return self._workers.list_all()

    def get(self, worker_id: str) -> Worker:
        worker = self._workers.get_by_id(worker_id)
        if not worker:
            raise NotFoundError("Worker not found")
        return worker

    def active_count(self) -> int:
        return sum(1 for w in self._workers.list_all() if w.is_active)

    def _ensure_unique(self, ops_id: str, *, ignore_id: Optional[str] = None) -> None:
        existing = self._workers.get_by_ops_id(ops_id)
        if existing and existing.worker_id != ignore_id:
            raise ValidationError(f'OpsID "{ops_id}" is already registered to {existing.full_name}')

    def _build(self, draft: WorkerDraft) -> Worker:
        return Worker(
            worker_id=self._new_id(),
            ops_id=draft.ops_id,
            full_name=draft.full_name,
            nik=draft.nik,
            phone=draft.phone,
            department=draft.department,
            status=draft.status,
            created_at=self._clock(),
        )

    def create(self, data: Mapping[str, Any]) -> Worker:
        draft = validate_draft(data)
        self._ensure_unique(draft.ops_id)
        worker = self._build(draft)
        self._workers.create(worker)
        logger.info("worker %s registered (%s)", worker.ops_id, worker.department.value)
        return worker

    def update(self, worker_id: str, data: Mapping[str, Any]) -> Worker:
        current = self.get(worker_id)
        draft = validate_draft(data)
        self._ensure_unique(draft.ops_id, ignore_id=current.worker_id)

        updated = Worker(
            worker_id=current.worker_id,
            ops_id=draft.ops_id,
            full_name=draft.full_name,
            nik=draft.nik,
            phone=draft.phone,
            department=draft.department,
            status=draft.status,
            created_at=current.created_at,
            contract_type=current.contract_type,
        )
        self._workers.update(updated)
        return updated

    def delete(self, worker_id: str) -> None:
        self.get(worker_id)
        if not self._workers.delete_by_id(worker_id):
            raise ValidationError("Failed to delete worker")
        logger.info("worker %s deleted", worker_id)

    def import_file(self, stream: BinaryIO) -> ImportResult:
        existing = {ops_key(w.ops_id) for w in self._workers.list_all()}
        result = parse_import(stream, existing_keys=existing)
        workers = [self._build(d) for d in result.drafts]
        self._workers.create_many(workers)
        logger.info("worker import: %d imported, %d skipped", result.imported, result.skipped)
        return result
