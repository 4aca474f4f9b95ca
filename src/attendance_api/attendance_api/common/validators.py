from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} should not be empty")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be longer than or equal to {min_len} characters")
    return value


def require_uuid(value: Any, field_name: str) -> str:
    value = require_non_empty(value, field_name)
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a UUID") from None


def optional_uuid(value: Any, field_name: str) -> Optional[str]:
    if value is None or value == "":
        return None
    return require_uuid(value, field_name)


def require_email(value: Any, field_name: str = "email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} must be an email")
    return value.lower()


def optional_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a valid ISO 8601 date string")
    try:
        return parse_iso_datetime(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid ISO 8601 date string") from None


def require_date(value: Any, field_name: str) -> date:
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be in YYYY-MM-DD format") from None


def optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return require_date(value, field_name)


def require_positive_int(value: Any, field_name: str, *, default: int, maximum: Optional[int] = None) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if parsed < 1:
        raise ValidationError(f"{field_name} must not be less than 1")
    if maximum is not None and parsed > maximum:
        raise ValidationError(f"{field_name} must not be greater than {maximum}")
    return parsed
