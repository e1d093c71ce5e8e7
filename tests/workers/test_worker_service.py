from __future__ import annotations

from datetime import datetime

import pytest

from src.shift_attendance.shift_attendance.core.enums import Department, WorkerStatus
from src.shift_attendance.shift_attendance.core.exceptions import NotFoundError, ValidationError
from src.shift_attendance.shift_attendance.workers.model import ops_key
from src.shift_attendance.shift_attendance.workers.service import WorkerService

NOW = datetime(2024, 3, 10, 9, 0)


def _payload(**overrides):
    data = {
        "opsId": "OPS001",
        "fullName": "Budi Santoso",
        "nik": "3171000000000001",
        "phone": "081200000001",
        "department": "SOC Operator",
    }
    data.update(overrides)
    return data


@pytest.fixture
def service(worker_repo):
    ids = iter(f"id-{i}" for i in range(100))
    return WorkerService(worker_repo, clock=lambda: NOW, id_factory=lambda: next(ids))


def test_create_defaults_to_active(service, worker_repo):
    worker = service.create(_payload())

    assert worker.worker_id == "id-0"
    assert worker.status is WorkerStatus.ACTIVE
    assert worker.department is Department.SOC_OPERATOR
    assert worker.contract_type == "Daily Worker Vendor - NEXUS"
    assert worker_repo.get_by_id("id-0") == worker
    assert service.active_count() == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"opsId": "  "},
        {"fullName": None},
        {"department": "Kitchen"},
        {"status": "Retired"},
    ],
)
def test_create_validates_fields(service, overrides):
    with pytest.raises(ValidationError):
        service.create(_payload(**overrides))


def test_ops_id_is_unique_ignoring_case(service):
    service.create(_payload())
    with pytest.raises(ValidationError):
        service.create(_payload(opsId="ops001", fullName="Someone Else"))


def test_update_keeps_identity(service):
    worker = service.create(_payload())

    updated = service.update(worker.worker_id, _payload(fullName="Budi S.", status="Blacklist"))

    assert updated.worker_id == worker.worker_id
    assert updated.created_at == worker.created_at
    assert updated.full_name == "Budi S."
    assert not updated.is_active


def test_update_rejects_taken_ops_id(service):
    service.create(_payload())
    other = service.create(_payload(opsId="OPS002"))

    with pytest.raises(ValidationError):
        service.update(other.worker_id, _payload(opsId="OPS001"))


def test_get_and_delete(service):
    worker = service.create(_payload())

    service.delete(worker.worker_id)

    with pytest.raises(NotFoundError):
        service.get(worker.worker_id)
    with pytest.raises(NotFoundError):
        service.delete(worker.worker_id)


def test_ops_key_lowercases_like_mysql():
    assert ops_key("  Nex001 ") == "nex001"
    # LOWER() keeps the sharp s; casefold would turn it into "ss"
    assert ops_key("STRAßE") == "straße"
    assert ops_key("STRAßE") != ops_key("STRASSE")
