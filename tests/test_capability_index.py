from __future__ import annotations

from module_troubleshooter.index import CapabilityIndex, group_by, group_by_each
from module_troubleshooter.models import Capability, Module, ModuleState

from builders import make_module


def test_group_by_keeps_first_seen_order() -> None:
    groups = group_by(["apple", "avocado", "banana", "blueberry", "cherry"], lambda s: s[0])
    assert list(groups) == ["a", "b", "c"]
    assert groups["b"] == ["banana", "blueberry"]


def test_group_by_each_lists_item_once_per_key() -> None:
    items = [("x", ["k1", "k2", "k1"]), ("y", ["k2"])]
    groups = group_by_each(items, lambda item: item[1])
    assert [i[0] for i in groups["k1"]] == ["x"]
    assert [i[0] for i in groups["k2"]] == ["x", "y"]


def test_group_by_returns_new_mapping() -> None:
    items = [1, 2, 3]
    first = group_by(items, lambda i: i % 2)
    first[0].append(99)
    assert group_by(items, lambda i: i % 2)[0] == [2]


def test_index_includes_capabilities_of_inactive_modules() -> None:
    active = make_module(1, "a", ModuleState.ACTIVE, exports=[Capability("pkg.x", "1.0")])
    inactive = make_module(2, "b", ModuleState.INSTALLED, exports=[Capability("pkg.x", "2.0")])
    index = CapabilityIndex.build([active, inactive])

    found = index.lookup("pkg.x")
    assert [c.version for c in found] == ["1.0", "2.0"]
    assert index.provider_of(found[1]) is inactive
    assert "pkg.x" in index
    assert len(index) == 1
    assert index.names() == ["pkg.x"]


def test_lookup_of_unknown_name_is_empty() -> None:
    index = CapabilityIndex.build([])
    assert index.lookup("nothing") == []


def test_lookup_returns_copy() -> None:
    index = CapabilityIndex.build([make_module(1, "a", exports=[Capability("pkg.x", "1.0")])])
    index.lookup("pkg.x").clear()
    assert len(index.lookup("pkg.x")) == 1


def test_capability_without_provider_is_attributed_to_declaring_module() -> None:
    module = Module(id=7, symbolic_name="m", state=ModuleState.ACTIVE, capabilities=[Capability("pkg.y", "1.0")])
    index = CapabilityIndex.build([module])
    assert index.lookup("pkg.y")[0].provider_id == 7
    assert index.provider_of(index.lookup("pkg.y")[0]) is module
    # The module itself is left untouched
    assert module.capabilities[0].provider_id is None


def test_same_module_at_several_versions() -> None:
    module = make_module(1, "multi", exports=[Capability("pkg.z", "1.0"), Capability("pkg.z", "2.0")])
    assert len(CapabilityIndex.build([module]).lookup("pkg.z")) == 2
