"""Domain entities used when planning packages for several posting dates."""

from dataclasses import dataclass, field
from datetime import date, datetime

from .package import Package

SCHEDULE_STATUS_PENDING = "pending"
SCHEDULE_STATUS_SCHEDULED = "scheduled"
SCHEDULE_STATUS_EXECUTING = "executing"
SCHEDULE_STATUS_COMPLETED = "completed"
SCHEDULE_STATUS_ERROR = "error"
SCHEDULE_STATUS_CANCELLED = "cancelled"
SCHEDULE_STATUSES = (
    SCHEDULE_STATUS_PENDING,
    SCHEDULE_STATUS_SCHEDULED,
    SCHEDULE_STATUS_EXECUTING,
    SCHEDULE_STATUS_COMPLETED,
    SCHEDULE_STATUS_ERROR,
    SCHEDULE_STATUS_CANCELLED,
)


@dataclass(frozen=True)
class PlannedFile:
    """File that will be written for one form of a package."""

    form_id: str
    form_name: str
    tcode: str
    file_name: str
    content: str


@dataclass
class DatePackage:
    """Package generated for a single posting date."""

    id: str
    posting_date: date
    package: Package
    files: list[PlannedFile] = field(default_factory=list)


@dataclass
class ScheduledPackage:
    id: str
    template_id: str
    template_name: str
    posting_date: date
    status: str
    scheduled_at: datetime
    executed_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None
    package_id: str | None = None


__all__ = [
    "DatePackage",
    "PlannedFile",
    "SCHEDULE_STATUSES",
    "SCHEDULE_STATUS_CANCELLED",
    "SCHEDULE_STATUS_COMPLETED",
    "SCHEDULE_STATUS_ERROR",
    "SCHEDULE_STATUS_EXECUTING",
    "SCHEDULE_STATUS_PENDING",
    "SCHEDULE_STATUS_SCHEDULED",
    "ScheduledPackage",
]
