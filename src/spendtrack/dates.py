"""Parsing helpers for calendar days and timestamps received over the API."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from .errors import InvalidArgument


def parse_day(raw: object, *, field: str = "date") -> date:
    """Parse ``YYYY-MM-DD`` (or an ISO timestamp, keeping its calendar day)."""

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    value = str(raw or "").strip()
    if not value:
        raise InvalidArgument(f"{field} is required.", fields={field: ["Date is required."]})
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidArgument(
            f"Invalid {field}: {value!r}",
            fields={field: ["Enter a valid date (YYYY-MM-DD)."]},
        ) from None


def parse_timestamp(raw: object, *, field: str = "date") -> Optional[datetime]:
    """Parse an optional ISO date/datetime; bare days become midnight UTC."""

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    value = str(raw).strip()
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidArgument(
            f"Invalid {field}: {value!r}",
            fields={field: ["Enter a valid date (YYYY-MM-DD)."]},
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_range(start_raw: object, end_raw: object) -> tuple[date, date]:
    """Parse an inclusive ``[start, end]`` day range."""

    start = parse_day(start_raw, field="startDate")
    end = parse_day(end_raw, field="endDate")
    if start > end:
        raise InvalidArgument(
            "startDate must not be after endDate.",
            fields={"startDate": ["Start date must be on or before the end date."]},
        )
    return start, end


def today_utc() -> date:
    return datetime.now(timezone.utc).date()
