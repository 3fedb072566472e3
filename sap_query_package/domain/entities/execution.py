"""Domain entities recording the progress of a package save run."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .validation import FileValidationResult

STEP_STATUS_PENDING = "pending"
STEP_STATUS_EXECUTING = "executing"
STEP_STATUS_COMPLETED = "completed"
STEP_STATUS_ERROR = "error"
TERMINAL_STEP_STATUSES = frozenset({STEP_STATUS_COMPLETED, STEP_STATUS_ERROR})

LOG_SEVERITY_INFO = "info"
LOG_SEVERITY_WARNING = "warning"
LOG_SEVERITY_ERROR = "error"
LOG_SEVERITY_SUCCESS = "success"


@dataclass
class ExecutionStep:
    """Save operation for one form of a package."""

    id: str
    form_id: str
    form_name: str
    file_name: str
    status: str = STEP_STATUS_PENDING
    started_at: datetime | None = None
    finished_at: datetime | None = None
    duration: float | None = None
    file_size: int | None = None
    error: str | None = None
    validation: FileValidationResult | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STEP_STATUSES


@dataclass(frozen=True)
class ExecutionLogEntry:
    timestamp: datetime
    severity: str
    message: str
    data: Any = None


@dataclass(frozen=True)
class ExecutionTally:
    """Final counters emitted once every step of a run is terminal."""

    success: int
    errors: int
    total: int


__all__ = [
    "ExecutionLogEntry",
    "ExecutionStep",
    "ExecutionTally",
    "LOG_SEVERITY_ERROR",
    "LOG_SEVERITY_INFO",
    "LOG_SEVERITY_SUCCESS",
    "LOG_SEVERITY_WARNING",
    "STEP_STATUS_COMPLETED",
    "STEP_STATUS_ERROR",
    "STEP_STATUS_EXECUTING",
    "STEP_STATUS_PENDING",
    "TERMINAL_STEP_STATUSES",
]
