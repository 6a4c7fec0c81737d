from datetime import date, datetime, timezone

from apps.billdora.utils import parse_any_date, plural_days, to_isoformat


def test_parse_any_date_variants():
    assert parse_any_date(None) is None
    assert parse_any_date("") is None
    assert parse_any_date("2025-06-30") == datetime(2025, 6, 30)
    assert parse_any_date(date(2025, 6, 30)) == datetime(2025, 6, 30)
    assert parse_any_date(86400) == datetime(1970, 1, 2)
    assert parse_any_date("2025-06-30T12:00:00+02:00") == datetime(2025, 6, 30, 10, 0)
    assert parse_any_date(datetime(2025, 1, 1, tzinfo=timezone.utc)) == datetime(2025, 1, 1)
    assert parse_any_date("June 30, 2025") == datetime(2025, 6, 30)
    assert parse_any_date("pending") is None


def test_to_isoformat():
    assert to_isoformat(datetime(2025, 1, 2, 3, 4, 5, 999)) == "2025-01-02T03:04:05"
    assert to_isoformat(None) is None


def test_plural_days():
    assert plural_days(1) == "1 day"
    assert plural_days(2) == "2 days"
    assert plural_days(0) == "0 day"
