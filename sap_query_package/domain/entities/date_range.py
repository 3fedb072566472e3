"""Domain entity representing the period a package is executed for."""

from dataclasses import dataclass
from datetime import date

PERIOD_TYPE_MONTH = "month"
PERIOD_TYPE_DAY = "day"
PERIOD_TYPES = (PERIOD_TYPE_MONTH, PERIOD_TYPE_DAY)


@dataclass
class DateRange:
    """Start and optional end date supplied by the caller.

    Dates may arrive already parsed or as ISO strings; parsing is deferred to
    the consumers so invalid input surfaces as ``InvalidDateError`` or as a
    validation issue depending on the operation.
    """

    start_date: date | str | None
    end_date: date | str | None = None
    period_type: str = PERIOD_TYPE_DAY


__all__ = ["DateRange", "PERIOD_TYPES", "PERIOD_TYPE_DAY", "PERIOD_TYPE_MONTH"]
