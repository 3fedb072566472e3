"""Use cases for planning packages across posting dates."""

from .planner import (
    cancel_scheduled_package,
    execute_scheduled_package,
    merge_missing_dates,
    period_type_for,
    plan_date_packages,
    save_date_packages,
    schedule_packages,
    summarize_scheduled_packages,
)

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
