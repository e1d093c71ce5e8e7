"""Fixed site tables: divisions, the departments each may draw from, shift codes."""
from __future__ import annotations

from typing import Optional

from ..core.constants import AUTO_CHECKOUT_HOURS
from ..core.enums import Department

_ALL_DEPARTMENTS = frozenset(Department)

DIVISION_DEPARTMENTS: dict[str, frozenset[Department]] = {
    "ASM2": frozenset({Department.SOC_OPERATOR}),
    "CACHE": frozenset({Department.CACHE}),
    "INVENTORY": frozenset({Department.INVENTORY}),
    "RETURN": frozenset({Department.RETURN}),
    "TP SUNTER 1": _ALL_DEPARTMENTS,
    "TP SUNTER 2": _ALL_DEPARTMENTS,
}

DIVISIONS = tuple(DIVISION_DEPARTMENTS)

SHIFT_ID_OPTIONS = (
    "SOCSTROPS0009 Shift 00 00:00 - 09:00",
    "SOCSTROPS0110 Shift 01 01:00 - 10:00",
    "SOCSTROPS0211 Shift 02 02:00 - 11:00",
    "SOCSTROPS0312 Shift 03 03:00 - 15:00",
    "SOCSTROPS0413 Shift 04 04:00 - 16:00",
    "SOCSTROPS0514 Shift 05 05:00 - 17:00",
    "SOCSTROPS0615 Shift 06 06:00 - 15:00",
    "SOCSTROPS0716 Shift 07 07:00 - 19:00",
    "SOCSTROPS0817 Shift 08 08:00 - 20:00",
    "SOCSTROPS0918 Shift 09 09:00 - 18:00",
    "SOCSTROPS1019 Shift 10 10:00 - 22:00",
    "SOCSTROPS1120 Shift 11 11:00 - 23:00",
    "SOCSTROPS1221 Shift 12 12:00 - 00:00",
    "SOCSTROPS1322 Shift 13 13:00 - 22:00",
    "SOCSTROPS1423 Shift 14 14:00 - 02:00",
    "SOCSTROPS1500 Shift 15 15:00 - 03:00",
    "SOCSTROPS1601 Shift 16 16:00 - 04:00",
    "SOCSTROPS1702 Shift 17 17:00 - 02:00",
    "SOCSTROPS1803 Shift 18 18:00 - 06:00",
    "SOCSTROPS1904 Shift 19 19:00 - 07:00",
    "SOCSTROPS2005 Shift 20 20:00 - 05:00",
    "SOCSTROPS2207 Shift 22 22:00 - 10:00",
    "SOCSTROPS2308 Shift 23 23:00 - 08:00",
)


def shift_time_options() -> list[str]:
    """One window label per starting hour, each spanning the auto-checkout length."""
    return [
        f"{start:02d}:00 - {(start + AUTO_CHECKOUT_HOURS) % 24:02d}:00"
        for start in range(24)
    ]


def allowed_departments(division: str) -> Optional[frozenset[Department]]:
    """None means the division is not restricted."""
    return DIVISION_DEPARTMENTS.get(division)
