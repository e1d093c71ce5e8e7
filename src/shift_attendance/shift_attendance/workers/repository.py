from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerRepository(Protocol):
    """Repository interface for the worker registry.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def get_by_ops_id(self, ops_id: str) -> Optional[Worker]:
        """Case-insensitive lookup."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Worker]:
        """Newest first."""

        raise NotImplementedError

    def create(self, worker: Worker) -> None:
        raise NotImplementedError

    def create_many(self, workers: Sequence[Worker]) -> int:
        raise NotImplementedError

    def update(self, worker: Worker) -> bool:
        raise NotImplementedError

    def delete_by_id(self, worker_id: str) -> bool:
        raise NotImplementedError
