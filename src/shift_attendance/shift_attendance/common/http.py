from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import CooldownActive, DomainError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int = 400, **payload: Any):
    return jsonify({"success": False, "message": message, **payload}), status


def json_errors(view):
    """Translate domain errors into JSON answers; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return fail(str(e), 404, reason=type(e).__name__)
        except CooldownActive as e:
            return fail(str(e), 400, reason=type(e).__name__, hoursLeft=e.hours_left, minutesLeft=e.minutes_left)
        except DomainError as e:
            return fail(str(e), 400, reason=type(e).__name__)
        except Exception:
            logger.exception("unhandled error in %s", view.__name__)
            return fail("System error, please try again", 500)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def query_date(name: str, default: Optional[date] = None) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def parse_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date-time")
    if parsed.tzinfo is not None:
        # stored timestamps are naive local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
