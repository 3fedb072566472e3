"""Execution of package saves against the storage gateway.

Every form of a package becomes one file. All writes of a run are dispatched
concurrently and the :class:`ExecutionTracker` records the outcome of each one.
Failed writes are terminal and are never retried.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import anyio

from sap_query_package.config import get_settings
from sap_query_package.domain.entities import (
    LOG_SEVERITY_ERROR,
    LOG_SEVERITY_INFO,
    LOG_SEVERITY_SUCCESS,
    LOG_SEVERITY_WARNING,
    STEP_STATUS_COMPLETED,
    STEP_STATUS_ERROR,
    STEP_STATUS_EXECUTING,
    STEP_STATUS_PENDING,
    DateRange,
    ExecutionLogEntry,
    ExecutionStep,
    ExecutionTally,
    FileValidationResult,
    Package,
    PlannedFile,
    ValidationResult,
)
from sap_query_package.domain.exceptions import StorageGatewayError
from sap_query_package.infrastructure.storage import StorageGateway
from sap_query_package.utils.datetime import now_in_app_timezone

from .documents import plan_package_files
from .validators import validate_generated_file, validate_package

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    LOG_SEVERITY_INFO: logging.INFO,
    LOG_SEVERITY_SUCCESS: logging.INFO,
    LOG_SEVERITY_WARNING: logging.WARNING,
    LOG_SEVERITY_ERROR: logging.ERROR,
}


class ExecutionTracker:
    """State machine for the steps of one save run."""

    def __init__(
        self,
        log_capacity: int | None = None,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        if log_capacity is None:
            log_capacity = get_settings().execution_log_capacity
        self._clock = clock
        self._log: deque[ExecutionLogEntry] = deque(maxlen=log_capacity)
        self._steps: list[ExecutionStep] = []
        self._index: dict[str, ExecutionStep] = {}
        self._started: dict[str, float] = {}
        self._resolved = 0
        self._tally: ExecutionTally | None = None
        self.saved_files: list[str] = []
        self.failed_files: list[str] = []

    @property
    def steps(self) -> list[ExecutionStep]:
        return list(self._steps)

    @property
    def log(self) -> list[ExecutionLogEntry]:
        return list(self._log)

    @property
    def tally(self) -> ExecutionTally | None:
        return self._tally

    @property
    def is_finished(self) -> bool:
        return self._tally is not None

    def add_log(self, severity: str, message: str, data: Any = None) -> None:
        self._log.append(
            ExecutionLogEntry(
                timestamp=self._clock(), severity=severity, message=message, data=data
            )
        )
        logger.log(_LOG_LEVELS.get(severity, logging.INFO), message)

    def start(self, files: Sequence[PlannedFile]) -> list[ExecutionStep]:
        """Reset the tracker and create one pending step per file."""

        self._log.clear()
        self._steps = [
            ExecutionStep(
                id=f"step_{index}",
                form_id=planned.form_id,
                form_name=planned.form_name,
                file_name=planned.file_name,
            )
            for index, planned in enumerate(files, start=1)
        ]
        self._index = {step.id: step for step in self._steps}
        self._started.clear()
        self._resolved = 0
        self._tally = None
        self.saved_files = []
        self.failed_files = []
        self.add_log(
            LOG_SEVERITY_INFO, f"Iniciando guardado de {len(self._steps)} archivo(s)"
        )
        if not self._steps:
            self._finish()
        return self.steps

    def get_step(self, step_id: str) -> ExecutionStep:
        try:
            return self._index[step_id]
        except KeyError as exc:
            raise ValueError("Paso de ejecución no encontrado") from exc

    def mark_executing(self, step_id: str) -> ExecutionStep:
        step = self.get_step(step_id)
        if step.status != STEP_STATUS_PENDING:
            raise ValueError(
                f"El paso {step_id} no puede pasar de {step.status} a {STEP_STATUS_EXECUTING}"
            )
        step.status = STEP_STATUS_EXECUTING
        step.started_at = self._clock()
        self._started[step_id] = time.perf_counter()
        self.add_log(LOG_SEVERITY_INFO, f"Guardando {step.file_name}")
        return step

    def _resolve(self, step: ExecutionStep, status: str) -> None:
        if step.status != STEP_STATUS_EXECUTING:
            raise ValueError(
                f"El paso {step.id} no puede pasar de {step.status} a {status}"
            )
        step.status = status
        step.finished_at = self._clock()
        started = self._started.pop(step.id, None)
        if started is not None:
            step.duration = time.perf_counter() - started
        self._resolved += 1

    def mark_completed(
        self,
        step_id: str,
        *,
        file_size: int | None = None,
        validation: FileValidationResult | None = None,
        saved_as: str | None = None,
    ) -> ExecutionStep:
        """Resolve the step as saved.

        ``saved_as`` is the name reported by the gateway; the planned file name
        is recorded when it is missing.
        """

        step = self.get_step(step_id)
        self._resolve(step, STEP_STATUS_COMPLETED)
        step.file_size = file_size
        step.validation = validation
        saved_name = saved_as or step.file_name
        self.saved_files.append(saved_name)
        self.add_log(
            LOG_SEVERITY_SUCCESS,
            f"Archivo guardado: {saved_name}",
            {"size": file_size, "duration": step.duration},
        )
        if validation is not None:
            for warning in validation.warnings:
                self.add_log(LOG_SEVERITY_WARNING, warning, {"file": step.file_name})
        self._finish_if_done()
        return step

    def mark_failed(self, step_id: str, message: str) -> ExecutionStep:
        step = self.get_step(step_id)
        self._resolve(step, STEP_STATUS_ERROR)
        step.error = message
        self.failed_files.append(step.file_name)
        self.add_log(
            LOG_SEVERITY_ERROR, f"Error al guardar {step.file_name}: {message}"
        )
        self._finish_if_done()
        return step

    def _finish_if_done(self) -> None:
        if self._resolved == len(self._steps):
            self._finish()

    def _finish(self) -> None:
        success = len(self.saved_files)
        errors = len(self.failed_files)
        self._tally = ExecutionTally(success=success, errors=errors, total=len(self._steps))
        severity = LOG_SEVERITY_SUCCESS if errors == 0 else LOG_SEVERITY_WARNING
        self.add_log(
            severity,
            f"Guardado finalizado: {success} exitoso(s), {errors} con error "
            f"de {len(self._steps)} archivo(s)",
            {"saved": list(self.saved_files), "failed": list(self.failed_files)},
        )


async def _save_file(
    gateway: StorageGateway,
    directory: str,
    planned: PlannedFile,
    step: ExecutionStep,
    tracker: ExecutionTracker,
) -> None:
    expected_size = len(planned.content.encode("utf-8"))
    try:
        result = await gateway.write_file(
            directory, planned.file_name, planned.content, overwrite=False
        )
    except (StorageGatewayError, OSError) as exc:
        tracker.mark_failed(step.id, str(exc) or exc.__class__.__name__)
        return
    except Exception as exc:
        logger.exception("Unexpected error while writing %s", planned.file_name)
        tracker.mark_failed(step.id, str(exc) or exc.__class__.__name__)
        return

    if not result.status:
        tracker.mark_failed(step.id, result.message or "Error desconocido")
        return

    file_size = result.size if result.size is not None else expected_size
    validation = validate_generated_file(result.saved_as, file_size, expected_size)
    tracker.mark_completed(
        step.id, file_size=file_size, validation=validation, saved_as=result.saved_as
    )


async def execute_file_saves(
    files: Sequence[PlannedFile],
    gateway: StorageGateway,
    directory: str,
    tracker: ExecutionTracker,
) -> ExecutionTally:
    """Write every planned file concurrently and return the final tally.

    A failing write only affects its own step; sibling writes keep running.
    """

    steps = tracker.start(files)
    async with anyio.create_task_group() as task_group:
        for step, planned in zip(steps, files):
            tracker.mark_executing(step.id)
            task_group.start_soon(_save_file, gateway, directory, planned, step, tracker)

    tally = tracker.tally
    if tally is None:  # pragma: no cover - every step resolves inside the task group
        raise RuntimeError("La ejecución terminó con pasos pendientes")
    return tally


@dataclass
class PackageSaveOutcome:
    """Result of :func:`save_package`."""

    validation: ValidationResult
    dispatched: bool = False
    tally: ExecutionTally | None = None
    steps: list[ExecutionStep] = field(default_factory=list)
    saved_files: list[str] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)


async def save_package(
    package: Package,
    date_range: DateRange,
    gateway: StorageGateway,
    *,
    directory: str | None = None,
    tracker: ExecutionTracker | None = None,
    allow_warnings: bool = True,
) -> PackageSaveOutcome:
    """Validate ``package`` and write one file per form.

    Nothing is written when validation reports errors, or warnings while
    ``allow_warnings`` is false.
    """

    validation = validate_package(package, date_range)
    if not validation.is_valid:
        logger.info(
            "Package %s not saved: %d validation errors",
            package.id,
            len(validation.errors),
        )
        return PackageSaveOutcome(validation=validation)
    if validation.warnings and not allow_warnings:
        logger.info(
            "Package %s not saved: %d warnings require confirmation",
            package.id,
            len(validation.warnings),
        )
        return PackageSaveOutcome(validation=validation)

    tracker = tracker or ExecutionTracker()
    target = directory or get_settings().queries_directory
    files = plan_package_files(package, date_range)
    tally = await execute_file_saves(files, gateway, target, tracker)
    return PackageSaveOutcome(
        validation=validation,
        dispatched=True,
        tally=tally,
        steps=tracker.steps,
        saved_files=list(tracker.saved_files),
        failed_files=list(tracker.failed_files),
    )


__all__ = [
    "ExecutionTracker",
    "PackageSaveOutcome",
    "execute_file_saves",
    "save_package",
]
