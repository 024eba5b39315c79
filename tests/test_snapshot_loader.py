from __future__ import annotations

import json
from pathlib import Path

import pytest

from module_troubleshooter.exceptions import SnapshotParseError
from module_troubleshooter.models import ModuleState
from module_troubleshooter.snapshot import SnapshotLoader

SNAPSHOT = {
    "modules": [
        {
            "id": 1,
            "symbolic_name": "com.example.orders",
            "state": "INSTALLED",
            "headers": {
                "Import-Package": 'com.example.api;version="[1.0,2.0)",com.example.opt;resolution:=optional',
                "Export-Package": "com.example.orders;version=1.2.0",
            },
            "requirements": [{"name": "com.example.extra", "version": "2.0"}],
            "packages": ["com.example.orders.internal"],
        },
        {
            "id": 2,
            "symbolic_name": "com.example.orders.nl",
            "state": 4,
            "headers": {"Fragment-Host": "com.example.orders"},
        },
        {
            "id": 3,
            "name": "com.example.api",
            "state": 32,
            "capabilities": [{"name": "com.example.api", "version": "2.0"}],
        },
    ],
    "components": [
        {
            "name": "com.example.orders.OrderService",
            "factory": "orders",
            "service_interfaces": ["com.example.api.Orders"],
            "references": [
                {"name": "store", "interface": "com.example.api.Store"},
                {"interface_name": "com.example.api.Audit", "cardinality": "0..n"},
            ],
            "configurations": [
                {"id": 3, "state": "unsatisfied", "satisfied_references": [{"name": "store"}, "other"]},
            ],
        },
    ],
    "service_references": 12,
}


def test_load_data_builds_modules() -> None:
    snapshot = SnapshotLoader().load_data(SNAPSHOT, source="memory")
    orders, fragment, api = snapshot.list_modules()

    assert orders.state == ModuleState.INSTALLED
    assert [(r.name, r.version_range, r.optional) for r in orders.requirements] == [
        ("com.example.api", "[1.0,2.0)", False),
        ("com.example.opt", None, True),
        ("com.example.extra", "2.0", False),
    ]
    assert [(c.name, c.version, c.provider_id) for c in orders.capabilities] == [("com.example.orders", "1.2.0", 1)]
    assert orders.packages == ["com.example.orders.internal"]

    assert fragment.is_fragment
    assert fragment.state == ModuleState.RESOLVED

    assert api.symbolic_name == "com.example.api"
    assert api.state == ModuleState.ACTIVE
    assert api.capabilities[0].provider_id == 3
    assert snapshot.source == "memory"
    assert snapshot.service_reference_count() == 12


def test_load_data_builds_components() -> None:
    snapshot = SnapshotLoader().load_data(SNAPSHOT)
    (descriptor,) = snapshot.list_component_descriptors()

    assert descriptor.factory == "orders"
    assert descriptor.configuration_policy == "optional"
    assert [(r.name, r.interface, r.optional) for r in descriptor.references] == [
        ("store", "com.example.api.Store", False),
        ("com.example.api.Audit", "com.example.api.Audit", True),
    ]
    assert descriptor.configurations[0].satisfied_references == ["store", "other"]
    assert snapshot.list_configurations(descriptor)[0].id == 3


def test_load_json_file(tmp_path: Path) -> None:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

    snapshot = SnapshotLoader().load(str(path))

    assert len(snapshot.list_modules()) == 3
    assert snapshot.source == str(path)


def test_load_yaml_file_with_unquoted_versions(tmp_path: Path) -> None:
    path = tmp_path / "snapshot.yaml"
    path.write_text(
        "modules:\n"
        "  - id: 1\n"
        "    symbolic_name: m\n"
        "    state: active\n"
        "    capabilities:\n"
        "      - {name: pkg.a, version: 1.5}\n",
        encoding="utf-8",
    )

    (module,) = SnapshotLoader().load(str(path)).list_modules()

    assert module.capabilities[0].version == "1.5"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        SnapshotLoader().load(str(tmp_path / "absent.json"))


def test_invalid_json_carries_file_path(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SnapshotParseError) as exc_info:
        SnapshotLoader().load(str(path))

    assert exc_info.value.file_path == str(path)


def test_invalid_content_carries_file_path(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("modules:\n  - symbolic_name: no-id\n", encoding="utf-8")

    with pytest.raises(SnapshotParseError) as exc_info:
        SnapshotLoader().load(str(path))

    assert exc_info.value.file_path == str(path)
    assert "missing 'id'" in str(exc_info.value)


@pytest.mark.parametrize("data", [
    ["not", "a", "mapping"],
    {"modules": [{"id": 1, "state": "sleeping"}]},
    {"modules": [{"id": 1, "state": "active", "headers": {"Import-Package": 'a;version="1.0'}}]},
    {"components": [{"name": "c", "references": [{"name": "r"}]}]},
    {"components": [{"name": "c", "references": ["svc.x"]}]},
    {"components": [{"name": "c", "configurations": [3]}]},
    {"modules": [{"id": 1, "state": "active", "headers": ["Import-Package"]}]},
    {"modules": [{"id": 1, "state": "active", "headers": {"Import-Package": 5}}]},
    {"service_references": "many"},
])
def test_invalid_documents(data) -> None:
    with pytest.raises(SnapshotParseError):
        SnapshotLoader().load_data(data)


def test_empty_document_is_empty_snapshot() -> None:
    snapshot = SnapshotLoader().load_data(None)
    assert snapshot.list_modules() == []
    assert snapshot.list_component_descriptors() == []


def test_non_mapping_reference_in_file_is_parse_error(tmp_path: Path) -> None:
    path = tmp_path / "refs.yaml"
    path.write_text("components:\n  - name: c\n    references: [svc.x]\n", encoding="utf-8")

    with pytest.raises(SnapshotParseError) as exc_info:
        SnapshotLoader().load(str(path))

    assert exc_info.value.file_path == str(path)
    assert "reference 0 of component c" in str(exc_info.value)
