from __future__ import annotations

from ..core.enums import Fulfillment
from ..workers.model import ops_key
from .model import BufferedRecord, SessionDescriptor
from .status import fulfillment, mpp_counter


class OpenSession:
    """Scan buffer of one open, not yet persisted session.

    Owned by a single SessionManager; entries are kept most recent first.
    """

    def __init__(self, descriptor: SessionDescriptor):
        self.descriptor = descriptor
        self._entries: list[BufferedRecord] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[BufferedRecord, ...]:
        return tuple(self._entries)

    def contains(self, ops_id: str) -> bool:
        key = ops_key(ops_id)
        return any(ops_key(e.ops_id) == key for e in self._entries)

    def add(self, entry: BufferedRecord) -> None:
        self._entries.insert(0, entry)

    def remove(self, worker_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.worker_id != worker_id]
        return len(self._entries) != before

    def fulfillment(self) -> Fulfillment:
        return fulfillment(self.descriptor.plan_mpp, len(self._entries))

    def mpp_counter(self) -> str:
        return mpp_counter(self.descriptor.plan_mpp, len(self._entries))
