"""Helpers for parsing calendar dates and producing timezone-aware timestamps."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sap_query_package.config import get_settings
from sap_query_package.domain.entities import DATE_KIND_SUMMARY
from sap_query_package.domain.exceptions import InvalidDateError

_DEFAULT_TIMEZONE: Final[str] = "America/Bogota"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)
_ISO_DATE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})(?:[T ][0-9:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$"
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable (via
    the ``Settings`` model). If the provided value cannot be resolved, the
    default ``America/Bogota`` timezone is used as a fallback.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def parse_calendar_date(value: date | datetime | str | None) -> date:
    """Return ``value`` as a :class:`date` or raise :class:`InvalidDateError`.

    Strings must be ISO formatted (``YYYY-MM-DD``, optionally followed by a
    time component). Impossible dates such as ``2025-02-30`` are rejected.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(value)

    match = _ISO_DATE_PATTERN.match(value.strip())
    if match is None:
        raise InvalidDateError(value)
    try:
        return date.fromisoformat(match.group("date"))
    except ValueError as exc:
        raise InvalidDateError(value) from exc


def to_detail_format(value: date | datetime | str) -> str:
    """Return ``value`` formatted as ``DD.MM.YYYY``."""

    parsed = parse_calendar_date(value)
    return f"{parsed.day:02d}.{parsed.month:02d}.{parsed.year:04d}"


def to_summary_format(value: date | datetime | str) -> str:
    """Return ``value`` formatted as ``YYYYMM``."""

    parsed = parse_calendar_date(value)
    return f"{parsed.year:04d}{parsed.month:02d}"


def format_for_kind(value: date | datetime | str, kind: str) -> str:
    """Format ``value`` using the encoding associated with ``kind``."""

    if kind == DATE_KIND_SUMMARY:
        return to_summary_format(value)
    return to_detail_format(value)


def _resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``timezone`` instance."""

    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    return ZoneInfo(_DEFAULT_TIMEZONE)


__all__ = [
    "format_for_kind",
    "get_app_timezone",
    "now_in_app_timezone",
    "parse_calendar_date",
    "to_detail_format",
    "to_summary_format",
]
