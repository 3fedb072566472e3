"""Planning and execution of packages for several posting dates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from sap_query_package.application.use_cases.packages import (
    ExecutionTracker,
    execute_file_saves,
    plan_package_files,
    validate_package,
)
from sap_query_package.application.use_cases.templates import instantiate_template
from sap_query_package.config import get_settings
from sap_query_package.domain.entities import (
    PERIOD_TYPE_DAY,
    PERIOD_TYPE_MONTH,
    SCHEDULE_STATUSES,
    SCHEDULE_STATUS_CANCELLED,
    SCHEDULE_STATUS_COMPLETED,
    SCHEDULE_STATUS_ERROR,
    SCHEDULE_STATUS_EXECUTING,
    SCHEDULE_STATUS_PENDING,
    SCHEDULE_STATUS_SCHEDULED,
    TEMPLATE_TYPE_SUMMARY_SYNC,
    DatePackage,
    DateRange,
    ExecutionTally,
    ScheduledPackage,
    Template,
)
from sap_query_package.infrastructure.storage import StorageGateway
from sap_query_package.utils.datetime import now_in_app_timezone, parse_calendar_date
from sap_query_package.utils.identifiers import new_short_id

logger = logging.getLogger(__name__)

_CANCELLABLE_STATUSES = frozenset({SCHEDULE_STATUS_PENDING, SCHEDULE_STATUS_SCHEDULED})


def merge_missing_dates(reports: Iterable[Mapping[str, Any]]) -> list[date]:
    """Return the sorted unique dates listed by posting date reports.

    Detailed reports carry ``missing_dates`` and simple ones ``posting_dates``.
    Raises ``InvalidDateError`` on the first unparsable date.
    """

    dates: set[date] = set()
    for report in reports:
        values = report.get("missing_dates")
        if not isinstance(values, list):
            values = report.get("posting_dates")
        if not isinstance(values, list):
            continue
        dates.update(parse_calendar_date(value) for value in values)
    return sorted(dates)


def period_type_for(template: Template) -> str:
    if template.type == TEMPLATE_TYPE_SUMMARY_SYNC:
        return PERIOD_TYPE_MONTH
    return PERIOD_TYPE_DAY


def plan_date_packages(
    template: Template, posting_dates: Sequence[date | str]
) -> list[DatePackage]:
    """Return one package, with its planned files, per posting date."""

    period_type = period_type_for(template)
    planned: list[DatePackage] = []
    for value in posting_dates:
        posting_date = parse_calendar_date(value)
        date_range = DateRange(start_date=posting_date, period_type=period_type)
        package = instantiate_template(template, date_range)
        planned.append(
            DatePackage(
                id=package.id,
                posting_date=posting_date,
                package=package,
                files=plan_package_files(package, date_range),
            )
        )
    return planned


async def save_date_packages(
    date_packages: Sequence[DatePackage],
    gateway: StorageGateway,
    *,
    directory: str | None = None,
    tracker: ExecutionTracker | None = None,
) -> ExecutionTally:
    """Write the files of every date package in a single tracked run.

    Every package is validated first. Nothing is written when one of them
    has errors; the ``ValueError`` names the first failing posting date.
    """

    for date_package in date_packages:
        message = _validation_error(date_package)
        if message is not None:
            raise ValueError(message)

    tracker = tracker or ExecutionTracker()
    files = [planned for date_package in date_packages for planned in date_package.files]
    target = directory or get_settings().queries_directory
    return await execute_file_saves(files, gateway, target, tracker)


def _validation_error(date_package: DatePackage) -> str | None:
    validation = validate_package(date_package.package)
    if validation.is_valid:
        return None
    logger.info(
        "Package for %s has %d validation errors",
        date_package.posting_date,
        len(validation.errors),
    )
    return (
        f"Paquete del {date_package.posting_date.isoformat()} inválido: "
        f"{validation.errors[0].message}"
    )


def schedule_packages(template: Template, posting_dates: Sequence[date | str]) -> list[ScheduledPackage]:
    scheduled_at = now_in_app_timezone()
    return [
        ScheduledPackage(
            id=f"schedule_{new_short_id()}",
            template_id=template.id,
            template_name=template.name or "Plantilla sin nombre",
            posting_date=parse_calendar_date(value),
            status=SCHEDULE_STATUS_PENDING,
            scheduled_at=scheduled_at,
        )
        for value in posting_dates
    ]


def cancel_scheduled_package(scheduled: ScheduledPackage) -> bool:
    """Cancel ``scheduled`` if it has not started. Returns whether it changed."""

    if scheduled.status not in _CANCELLABLE_STATUSES:
        return False
    scheduled.status = SCHEDULE_STATUS_CANCELLED
    return True


async def execute_scheduled_package(
    scheduled: ScheduledPackage,
    template: Template,
    gateway: StorageGateway,
    *,
    directory: str | None = None,
    tracker: ExecutionTracker | None = None,
) -> ScheduledPackage:
    """Generate and save the package of ``scheduled``.

    Only pending or scheduled entries run; cancelled ones are left untouched.
    """

    if scheduled.status not in _CANCELLABLE_STATUSES:
        logger.info(
            "Skipping scheduled package %s with status %s", scheduled.id, scheduled.status
        )
        return scheduled

    scheduled.status = SCHEDULE_STATUS_EXECUTING
    scheduled.executed_at = now_in_app_timezone()
    try:
        (date_package,) = plan_date_packages(template, [scheduled.posting_date])
    except ValueError as exc:
        scheduled.status = SCHEDULE_STATUS_ERROR
        scheduled.error = str(exc) or "Error desconocido al ejecutar el paquete"
        return scheduled

    try:
        tally = await save_date_packages(
            [date_package], gateway, directory=directory, tracker=tracker
        )
    except ValueError as exc:
        scheduled.status = SCHEDULE_STATUS_ERROR
        scheduled.error = str(exc)
        return scheduled
    scheduled.package_id = date_package.id
    if tally.errors:
        scheduled.status = SCHEDULE_STATUS_ERROR
        scheduled.error = f"{tally.errors} de {tally.total} archivo(s) no se guardaron"
    else:
        scheduled.status = SCHEDULE_STATUS_COMPLETED
        scheduled.completed_at = now_in_app_timezone()
    return scheduled


def summarize_scheduled_packages(scheduled: Iterable[ScheduledPackage]) -> dict[str, int]:
    """Return the number of scheduled packages per status plus ``total``."""

    counts = {status: 0 for status in SCHEDULE_STATUSES}
    total = 0
    for entry in scheduled:
        counts[entry.status] = counts.get(entry.status, 0) + 1
        total += 1
    counts["total"] = total
    return counts


__all__ = [
    "cancel_scheduled_package",
    "execute_scheduled_package",
    "merge_missing_dates",
    "period_type_for",
    "plan_date_packages",
    "save_date_packages",
    "schedule_packages",
    "summarize_scheduled_packages",
]
