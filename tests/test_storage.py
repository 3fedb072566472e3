import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import anyio
import pytest

from sap_query_package.domain.exceptions import (
    StorageAlreadyExistsError,
    StorageNotFoundError,
)
from sap_query_package.infrastructure import (
    InMemoryStorageGateway,
    StorageGateway,
    join_remote_path,
)


def test_join_remote_path():
    assert join_remote_path("sap-queries/", "a.sqpr") == "sap-queries/a.sqpr"
    assert join_remote_path(None, "a.sqpr") == "a.sqpr"


def test_in_memory_gateway_satisfies_protocol():
    assert isinstance(InMemoryStorageGateway(), StorageGateway)


def test_listing_only_returns_direct_children():
    gateway = InMemoryStorageGateway(
        {
            "flows/ksb1.json": "{}",
            "flows/old/kob1.json": "{}",
            "queries/a.sqpr": "{}",
        }
    )

    entries = anyio.run(gateway.list_files, "flows")

    assert [entry.name for entry in entries] == ["ksb1.json"]
    assert entries[0].path == "flows/ksb1.json"
    assert entries[0].size == 2


def test_write_refuses_to_overwrite_unless_asked():
    gateway = InMemoryStorageGateway({"out/a.sqpr": "viejo"})

    with pytest.raises(StorageAlreadyExistsError):
        anyio.run(gateway.write_file, "out", "a.sqpr", "nuevo")

    result = anyio.run(lambda: gateway.write_file("out", "a.sqpr", "nuevo", overwrite=True))

    assert result.saved_as == "a.sqpr"
    assert result.size == 5
    assert anyio.run(gateway.read_file, "out/a.sqpr") == "nuevo"


def test_exists_and_delete():
    gateway = InMemoryStorageGateway({"out/a.sqpr": "{}"})

    assert anyio.run(gateway.exists, "a.sqpr", "out") is True
    anyio.run(gateway.delete_file, "a.sqpr", "out")
    assert anyio.run(gateway.exists, "a.sqpr", "out") is False

    with pytest.raises(StorageNotFoundError):
        anyio.run(gateway.delete_file, "out/a.sqpr")
    with pytest.raises(StorageNotFoundError):
        anyio.run(gateway.read_file, "out/a.sqpr")


def test_configured_failures_are_raised_on_write():
    gateway = InMemoryStorageGateway()
    gateway.fail_on("a.sqpr", OSError("conexión perdida"))

    with pytest.raises(OSError):
        anyio.run(gateway.write_file, "out", "a.sqpr", "{}")
    assert gateway.files == {}
