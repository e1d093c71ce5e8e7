"""Total conversions from driver rows to domain field values.

Every helper raises DecodeError instead of defaulting, so a malformed row
never turns into a half-filled domain object.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Type, TypeVar

from ..core.exceptions import DecodeError

E = TypeVar("E", bound=Enum)


def column(row: Mapping[str, Any], name: str) -> Any:
    if name not in row:
        raise DecodeError(f"missing column {name!r}")
    return row[name]


def as_str(row: Mapping[str, Any], name: str) -> str:
    value = column(row, name)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if not isinstance(value, str):
        raise DecodeError(f"column {name!r}: expected text, got {type(value).__name__}")
    return value


def as_optional_str(row: Mapping[str, Any], name: str) -> Optional[str]:
    if column(row, name) is None:
        return None
    return as_str(row, name)


def as_int(row: Mapping[str, Any], name: str) -> int:
    value = column(row, name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"column {name!r}: expected integer, got {type(value).__name__}")
    return value


def as_bool(row: Mapping[str, Any], name: str) -> bool:
    value = column(row, name)
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise DecodeError(f"column {name!r}: expected boolean, got {value!r}")


def as_datetime(row: Mapping[str, Any], name: str) -> datetime:
    value = column(row, name)
    if not isinstance(value, datetime):
        raise DecodeError(f"column {name!r}: expected datetime, got {type(value).__name__}")
    return value


def as_optional_datetime(row: Mapping[str, Any], name: str) -> Optional[datetime]:
    if column(row, name) is None:
        return None
    return as_datetime(row, name)


def as_date(row: Mapping[str, Any], name: str) -> date:
    value = column(row, name)
    if isinstance(value, datetime) or not isinstance(value, date):
        raise DecodeError(f"column {name!r}: expected date, got {type(value).__name__}")
    return value


def as_enum(row: Mapping[str, Any], name: str, enum_cls: Type[E]) -> E:
    value = as_str(row, name)
    try:
        return enum_cls(value)
    except ValueError:
        raise DecodeError(f"column {name!r}: unknown {enum_cls.__name__} value {value!r}")


def as_optional_enum(row: Mapping[str, Any], name: str, enum_cls: Type[E]) -> Optional[E]:
    if column(row, name) is None:
        return None
    return as_enum(row, name, enum_cls)
