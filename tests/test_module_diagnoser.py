from __future__ import annotations

from typing import List

import pytest

from builders import make_module
from module_troubleshooter.analysis import ModuleRequirementDiagnoser, classify_mismatch, diagnose_module
from module_troubleshooter.index import CapabilityIndex
from module_troubleshooter.models import (
    Capability,
    MismatchSubtype,
    Module,
    ModuleFindingKind,
    ModuleState,
    Requirement,
)
from module_troubleshooter.versioning import Version, VersionRange


def _diagnose(target: Module, others: List[Module]):
    return diagnose_module(target, CapabilityIndex.build([target] + others))


@pytest.mark.parametrize("found,expected", [
    ("0.9", MismatchSubtype.TOO_OLD),
    ("2.0", MismatchSubtype.TOO_NEW),
    ("2.5.1", MismatchSubtype.TOO_NEW),
])
def test_classify_mismatch(found: str, expected: MismatchSubtype) -> None:
    assert classify_mismatch(VersionRange.parse("[1.0,2.0)"), Version.parse(found)) == expected


def test_classify_mismatch_inside_range_is_different_version() -> None:
    assert classify_mismatch(VersionRange.parse("[1.0,2.0)"), Version.parse("1.5")) == MismatchSubtype.DIFFERENT_VERSION


def test_missing_capability_is_reported_exactly_once() -> None:
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])
    findings = _diagnose(module, [])

    assert len(findings) == 1
    assert findings[0].kind == ModuleFindingKind.NOT_EXPORTED_ANYWHERE
    assert findings[0].name == "com.example.store"
    assert findings[0].required_range == "[1.0,2.0)"


def test_satisfied_by_active_provider_yields_nothing() -> None:
    provider = make_module(2, "store", exports=[Capability("com.example.store", "1.5.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])

    assert _diagnose(module, [provider]) == []


def test_requirement_without_range_accepts_any_version() -> None:
    provider = make_module(2, "store", exports=[Capability("com.example.store", "99.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store")])

    assert _diagnose(module, [provider]) == []


@pytest.mark.parametrize("offered,expected", [
    ("2.0", MismatchSubtype.TOO_NEW),
    ("0.9", MismatchSubtype.TOO_OLD),
])
def test_single_candidate_out_of_range(offered: str, expected: MismatchSubtype) -> None:
    provider = make_module(2, "store", exports=[Capability("com.example.store", offered)])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])

    findings = _diagnose(module, [provider])

    assert len(findings) == 1
    finding = findings[0]
    assert finding.kind == ModuleFindingKind.VERSION_MISMATCH
    assert finding.subtype == expected
    assert finding.found_version == offered
    assert finding.provider_id == 2
    assert finding.provider_label == "store (2)"
    assert finding.candidate is False


def test_inactive_provider_of_matching_capability_is_chain_finding() -> None:
    provider = make_module(2, "store", ModuleState.INSTALLED, exports=[Capability("com.example.store", "1.5.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])

    findings = _diagnose(module, [provider])

    assert len(findings) == 1
    assert findings[0].kind == ModuleFindingKind.DEPENDENCY_CHAIN_INACTIVE
    assert findings[0].provider_id == 2
    assert findings[0].provider_status == "Installed"


def test_resolved_fragment_provider_counts_as_active() -> None:
    fragment = make_module(2, "store.fragment", ModuleState.RESOLVED, fragment=True,
                           exports=[Capability("com.example.store", "1.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "1.0")])

    assert _diagnose(module, [fragment]) == []


def test_chain_findings_can_be_switched_off() -> None:
    provider = make_module(2, "store", ModuleState.INSTALLED, exports=[Capability("com.example.store", "1.5.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])
    index = CapabilityIndex.build([module, provider])

    assert ModuleRequirementDiagnoser(index, include_dependency_chain=False).diagnose(module) == []


def test_first_satisfying_candidate_wins() -> None:
    old = make_module(2, "store.old", exports=[Capability("com.example.store", "0.5")])
    good = make_module(3, "store.good", exports=[Capability("com.example.store", "1.2")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])

    assert _diagnose(module, [old, good]) == []


def test_every_mismatching_candidate_is_reported() -> None:
    old = make_module(2, "store.old", exports=[Capability("com.example.store", "0.5")])
    new = make_module(3, "store.new", exports=[Capability("com.example.store", "3.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])

    findings = _diagnose(module, [old, new])

    assert [(f.provider_id, f.subtype) for f in findings] == [
        (2, MismatchSubtype.TOO_OLD),
        (3, MismatchSubtype.TOO_NEW),
    ]
    assert all(f.candidate for f in findings)


def test_malformed_range_is_reported_as_different_version() -> None:
    provider = make_module(2, "store", exports=[Capability("com.example.store", "1.0")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[2.0,1.0)")])

    findings = _diagnose(module, [provider])

    assert len(findings) == 1
    assert findings[0].subtype == MismatchSubtype.DIFFERENT_VERSION
    assert "Malformed version range" in findings[0].notes


def test_unparsable_candidate_version_is_different_version() -> None:
    provider = make_module(2, "store", exports=[Capability("com.example.store", "one.two")])
    module = make_module(1, "orders", ModuleState.INSTALLED, imports=[Requirement("com.example.store", "[1.0,2.0)")])

    findings = _diagnose(module, [provider])

    assert findings[0].subtype == MismatchSubtype.DIFFERENT_VERSION
    assert findings[0].found_version == "one.two"


def test_optional_and_own_requirements_are_skipped() -> None:
    module = make_module(
        1, "orders", ModuleState.INSTALLED,
        imports=[
            Requirement("com.example.optional", "1.0", optional=True),
            Requirement("com.example.orders", "1.0"),
            Requirement("com.example.orders.internal"),
        ],
        exports=[Capability("com.example.orders", "1.0")],
        packages=["com.example.orders.internal"],
    )

    assert _diagnose(module, []) == []


def test_findings_follow_declaration_order() -> None:
    module = make_module(1, "orders", ModuleState.INSTALLED,
                         imports=[Requirement("b.missing"), Requirement("a.missing"), Requirement("c.missing")])

    assert [f.name for f in _diagnose(module, [])] == ["b.missing", "a.missing", "c.missing"]


def test_no_findings_for_lifecycle_only_problem() -> None:
    module = make_module(1, "orders", ModuleState.RESOLVED)
    assert _diagnose(module, []) == []


def test_chain_fixture(chain_modules: List[Module]) -> None:
    api, impl, app, _ = chain_modules
    index = CapabilityIndex.build(chain_modules)
    diagnoser = ModuleRequirementDiagnoser(index)

    assert [f.kind for f in diagnoser.diagnose(api)] == [ModuleFindingKind.NOT_EXPORTED_ANYWHERE]
    assert [f.kind for f in diagnoser.diagnose(impl)] == [ModuleFindingKind.DEPENDENCY_CHAIN_INACTIVE]
    assert [(f.kind, f.provider_id) for f in diagnoser.diagnose(app)] == [
        (ModuleFindingKind.DEPENDENCY_CHAIN_INACTIVE, 1)
    ]
