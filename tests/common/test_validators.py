from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.attendance_api.attendance_api.common.datetime_utils import parse_iso_datetime, to_iso_utc
from src.attendance_api.attendance_api.common.validators import (
    optional_datetime,
    require_date,
    require_email,
    require_positive_int,
    require_uuid,
)
from src.attendance_api.attendance_api.core.exceptions import ValidationError


def test_require_uuid():
    value = "2f56f85a-f8e4-4c03-82a2-b723bcf6e1f4"
    assert require_uuid(value, "employeeId") == value
    with pytest.raises(ValidationError, match="employeeId must be a UUID"):
        require_uuid("not-a-uuid", "employeeId")
    with pytest.raises(ValidationError):
        require_uuid(None, "employeeId")


def test_require_date():
    assert require_date("2026-02-07", "dateFrom") == date(2026, 2, 7)
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        require_date("2026-2-7", "dateFrom")
    with pytest.raises(ValidationError):
        require_date("2026-02-30", "dateFrom")


def test_optional_datetime_accepts_z_suffix():
    assert optional_datetime(None, "timestamp") is None
    assert optional_datetime("2026-02-07T09:00:00Z", "timestamp") == datetime(2026, 2, 7, 9, tzinfo=timezone.utc)
    with pytest.raises(ValidationError, match="ISO 8601"):
        optional_datetime("yesterday", "timestamp")


def test_require_email_lowercases():
    assert require_email("John@Company.COM") == "john@company.com"
    with pytest.raises(ValidationError):
        require_email("john")


def test_require_positive_int():
    assert require_positive_int(None, "page", default=1) == 1
    assert require_positive_int("5", "page", default=1) == 5
    with pytest.raises(ValidationError):
        require_positive_int("0", "page", default=1)
    with pytest.raises(ValidationError):
        require_positive_int("101", "limit", default=20, maximum=100)


def test_to_iso_utc_uses_milliseconds_and_z():
    aware = parse_iso_datetime("2026-02-07T09:00:00+02:00")
    assert to_iso_utc(aware) == "2026-02-07T07:00:00.000Z"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2026-02-07T09:00:00.5Z", datetime(2026, 2, 7, 9, 0, 0, 500000, tzinfo=timezone.utc)),
        ("20260207T090000", datetime(2026, 2, 7, 9, 0, 0)),
        ("2026-02-07 09:00:00+07:00", datetime(2026, 2, 7, 2, 0, 0, tzinfo=timezone.utc)),
    ],
)
def test_parse_iso_datetime_accepts_common_iso_forms(raw, expected):
    assert parse_iso_datetime(raw) == expected
