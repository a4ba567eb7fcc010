"""Parsing of API date arguments."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from spendtrack.dates import parse_day, parse_range, parse_timestamp
from spendtrack.errors import InvalidArgument


def test_parse_day_accepts_dates_and_timestamps():
    assert parse_day("2024-03-01") == date(2024, 3, 1)
    assert parse_day("2024-03-01T18:30:00Z") == date(2024, 3, 1)
    assert parse_day(datetime(2024, 3, 1, 9)) == date(2024, 3, 1)


@pytest.mark.parametrize("raw", ["", None, "03/01/2024", "2024-02-30"])
def test_parse_day_rejects(raw):
    with pytest.raises(InvalidArgument):
        parse_day(raw)


def test_parse_timestamp():
    assert parse_timestamp(None) is None
    assert parse_timestamp("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-03-01T10:00:00") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    with pytest.raises(InvalidArgument):
        parse_timestamp("soon")


def test_parse_range_is_inclusive_and_ordered():
    assert parse_range("2024-03-01", "2024-03-01") == (date(2024, 3, 1), date(2024, 3, 1))
    with pytest.raises(InvalidArgument):
        parse_range("2024-03-02", "2024-03-01")
