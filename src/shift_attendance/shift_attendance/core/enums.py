from __future__ import annotations

from enum import Enum


class Department(str, Enum):
    SOC_OPERATOR = "SOC Operator"
    CACHE = "Cache"
    RETURN = "Return"
    INVENTORY = "Inventory"


class WorkerStatus(str, Enum):
    """Only ACTIVE workers may be scanned into a session."""

    ACTIVE = "Active"
    NON_ACTIVE = "Non Active"
    BLACKLIST = "Blacklist"


class ManualStatus(str, Enum):
    """Manual tag set by an administrator on a persisted record."""

    PARTIAL = "Partial"
    BUFFER = "Buffer"


class Fulfillment(str, Enum):
    GAP = "GAP"
    FULL_FILL = "FULL FILL"
    FULL_FILL_BUFFER = "FULL FILL BUFFER"
