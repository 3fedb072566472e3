import pathlib
import random
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import anyio
import pytest

from sap_query_package.application.use_cases.packages import (
    ExecutionTracker,
    execute_file_saves,
    save_package,
)
from sap_query_package.domain.entities import (
    STEP_STATUS_COMPLETED,
    STEP_STATUS_ERROR,
    STEP_STATUS_PENDING,
    DateRange,
    Form,
    Package,
    PlannedFile,
    WriteResult,
)
from sap_query_package.domain.exceptions import (
    StorageAlreadyExistsError,
    StorageTransportError,
)
from sap_query_package.infrastructure import InMemoryStorageGateway


def _build_files(count):
    return [
        PlannedFile(
            form_id=f"f{index}",
            form_name=f"Form {index}",
            tcode="KSB1",
            file_name=f"0000000{index}-KSB1@startDate=15.03.2025.sqpr",
            content='{"tcode": "KSB1"}',
        )
        for index in range(count)
    ]


def _build_package():
    forms = [
        Form(
            id=f"f{index}",
            tcode=tcode,
            custom_name=custom_name,
            json_data={"$meta": {"tcode": tcode}, "targetContext": {}, "steps": {}},
            parameters=["Layout"],
            values={"Layout": "/X", "startDate": "15.03.2025"},
        )
        for index, (tcode, custom_name) in enumerate(
            [("KSB1", "KSB1"), ("KOB1", "KOB1"), ("CJI3", "CJI3_ALLCOST")]
        )
    ]
    return Package(id="pkg", name="DETAILS_SYNC", forms=forms)


class _StubGateway:
    """Gateway that completes writes in reverse order and can report failures."""

    def __init__(self, failing=(), rejected=()):
        self._failing = set(failing)
        self._rejected = set(rejected)
        self.calls = []

    async def write_file(self, directory, file_name, content, overwrite=False):
        self.calls.append((directory, file_name, overwrite))
        await anyio.sleep(0.001 * (10 - len(self.calls)))
        if file_name in self._failing:
            raise StorageTransportError("Conexión rechazada")
        if file_name in self._rejected:
            return WriteResult(saved_as=file_name, status=False, message="Sin permisos")
        return WriteResult(saved_as=file_name, size=len(content))


def test_steps_start_pending_in_form_order():
    tracker = ExecutionTracker()

    steps = tracker.start(_build_files(3))

    assert [step.form_id for step in steps] == ["f0", "f1", "f2"]
    assert all(step.status == STEP_STATUS_PENDING for step in steps)
    assert tracker.tally is None


def test_illegal_transitions_raise():
    tracker = ExecutionTracker()
    step = tracker.start(_build_files(1))[0]

    with pytest.raises(ValueError):
        tracker.mark_completed(step.id)

    tracker.mark_executing(step.id)
    tracker.mark_failed(step.id, "boom")

    with pytest.raises(ValueError):
        tracker.mark_executing(step.id)
    with pytest.raises(ValueError):
        tracker.mark_completed(step.id)


def test_unknown_step_is_rejected():
    tracker = ExecutionTracker()
    tracker.start([])

    with pytest.raises(ValueError) as exc_info:
        tracker.mark_executing("step_99")

    assert "Paso de ejecución no encontrado" in str(exc_info.value)


@pytest.mark.parametrize("seed", range(5))
def test_tally_holds_for_any_resolution_order(seed):
    rng = random.Random(seed)
    files = _build_files(8)
    tracker = ExecutionTracker()
    steps = tracker.start(files)
    for step in steps:
        tracker.mark_executing(step.id)

    order = list(steps)
    rng.shuffle(order)
    outcomes = {}
    for step in order:
        assert tracker.tally is None
        if rng.random() < 0.5:
            tracker.mark_completed(step.id, file_size=10)
            outcomes[step.id] = STEP_STATUS_COMPLETED
        else:
            tracker.mark_failed(step.id, "fallo")
            outcomes[step.id] = STEP_STATUS_ERROR

    tally = tracker.tally
    assert tally.success + tally.errors == tally.total == 8
    assert tally.success == list(outcomes.values()).count(STEP_STATUS_COMPLETED)
    assert tracker.log[-1].message.startswith("Guardado finalizado")


def test_empty_run_finishes_immediately():
    tracker = ExecutionTracker()
    tracker.start([])

    assert tracker.is_finished
    assert (tracker.tally.success, tracker.tally.errors, tracker.tally.total) == (0, 0, 0)


def test_log_is_capped_and_drops_oldest():
    tracker = ExecutionTracker(log_capacity=3)
    tracker.start([])
    for index in range(5):
        tracker.add_log("info", f"mensaje {index}")

    assert [entry.message for entry in tracker.log] == ["mensaje 2", "mensaje 3", "mensaje 4"]


def test_new_run_clears_previous_steps_and_log():
    tracker = ExecutionTracker()
    step = tracker.start(_build_files(1))[0]
    tracker.mark_executing(step.id)
    tracker.mark_completed(step.id, file_size=1)

    tracker.start(_build_files(2))

    assert len(tracker.steps) == 2
    assert tracker.saved_files == []
    assert len(tracker.log) == 1


def test_concurrent_saves_isolate_failures():
    files = _build_files(4)
    gateway = _StubGateway(failing={files[1].file_name}, rejected={files[2].file_name})
    tracker = ExecutionTracker()

    tally = anyio.run(execute_file_saves, files, gateway, "sap-queries", tracker)

    assert (tally.success, tally.errors, tally.total) == (2, 2, 4)
    assert sorted(tracker.failed_files) == sorted([files[1].file_name, files[2].file_name])
    statuses = {step.file_name: step for step in tracker.steps}
    assert statuses[files[1].file_name].error == "Conexión rechazada"
    assert statuses[files[2].file_name].error == "Sin permisos"
    completed = statuses[files[0].file_name]
    assert completed.status == STEP_STATUS_COMPLETED
    assert completed.duration is not None
    assert completed.validation.is_valid
    assert all(call[2] is False for call in gateway.calls)
    assert len(gateway.calls) == 4


def test_save_package_writes_one_file_per_form():
    gateway = InMemoryStorageGateway()

    outcome = anyio.run(
        lambda: save_package(
            _build_package(), DateRange(start_date="2025-03-15"), gateway, directory="out"
        )
    )

    assert outcome.dispatched
    assert outcome.tally.total == 3
    assert outcome.tally.errors == 0
    assert len(gateway.files) == 3
    names = sorted(outcome.saved_files)
    assert any("-CJI3#ALLCOST@startDate=15.03.2025.sqpr" in name for name in names)
    assert all(path.startswith("out/") for path in gateway.files)


def test_save_package_blocks_on_validation_errors():
    package = _build_package()
    package.forms[0].tcode = ""
    gateway = InMemoryStorageGateway()

    outcome = anyio.run(
        lambda: save_package(package, DateRange(start_date="2025-03-15"), gateway)
    )

    assert not outcome.dispatched
    assert not outcome.validation.is_valid
    assert gateway.files == {}


def test_save_package_can_require_warning_confirmation():
    package = _build_package()
    package.forms[0].parameters = []
    gateway = InMemoryStorageGateway()

    outcome = anyio.run(
        lambda: save_package(
            package, DateRange(start_date="2025-03-15"), gateway, allow_warnings=False
        )
    )

    assert not outcome.dispatched
    assert outcome.validation.warnings


def test_collisions_are_reported_not_retried():
    files = _build_files(1)
    gateway = InMemoryStorageGateway({f"sap-queries/{files[0].file_name}": "{}"})
    tracker = ExecutionTracker()

    tally = anyio.run(execute_file_saves, files, gateway, "sap-queries", tracker)

    assert tally.errors == 1
    assert "El archivo ya existe" in tracker.steps[0].error


def test_gateway_error_classes_are_isolated():
    files = _build_files(2)
    gateway = InMemoryStorageGateway()
    gateway.fail_on(files[0].file_name, StorageAlreadyExistsError("duplicado"))
    gateway.fail_on(files[1].file_name, OSError("red caída"))
    tracker = ExecutionTracker()

    tally = anyio.run(execute_file_saves, files, gateway, "sap-queries", tracker)

    assert tally.errors == 2
    assert [step.error for step in tracker.steps] == ["duplicado", "red caída"]


class _SSHError(Exception):
    pass


class _SshGateway:
    """Gateway whose client raises errors outside the storage hierarchy."""

    def __init__(self, failing):
        self._failing = failing

    async def write_file(self, directory, file_name, content, overwrite=False):
        if file_name == self._failing:
            raise _SSHError("Canal SSH cerrado")
        await anyio.sleep(0.001)
        return WriteResult(saved_as=file_name, size=len(content))


def test_unexpected_client_errors_only_fail_their_step():
    files = _build_files(3)
    tracker = ExecutionTracker()

    tally = anyio.run(execute_file_saves, files, _SshGateway(files[0].file_name), "out", tracker)

    assert (tally.success, tally.errors, tally.total) == (2, 1, 3)
    assert [step.status for step in tracker.steps] == [
        STEP_STATUS_ERROR,
        STEP_STATUS_COMPLETED,
        STEP_STATUS_COMPLETED,
    ]
    assert tracker.steps[0].error == "Canal SSH cerrado"
    assert tracker.is_finished


class _RenamingGateway:
    async def write_file(self, directory, file_name, content, overwrite=False):
        return WriteResult(saved_as=f"remote_{file_name}", size=len(content))


def test_saved_files_use_the_name_reported_by_the_gateway():
    files = _build_files(1)
    tracker = ExecutionTracker()

    anyio.run(execute_file_saves, files, _RenamingGateway(), "out", tracker)

    assert tracker.saved_files == [f"remote_{files[0].file_name}"]
    assert tracker.steps[0].file_name == files[0].file_name
