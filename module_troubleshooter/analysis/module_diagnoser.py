"""
Diagnosis of unsatisfied requirements of inactive modules.

For every requirement the possible causes are checked in order:
- nothing exports the capability at all
- something exports it, but not in a matching version
- a matching export exists, but its provider is itself not active
"""

import logging
from typing import List, Optional

from ..exceptions import InvalidVersion, MalformedVersionRange
from ..index import CapabilityIndex
from ..models import (
    Capability,
    MismatchSubtype,
    Module,
    ModuleFinding,
    ModuleFindingKind,
    Requirement
)
from ..versioning import Version, VersionRange
from .base import ModuleDiagnoser
from .inactivity import is_inactive, status_text

logger = logging.getLogger(__name__)


def classify_mismatch(required: VersionRange, found: Version) -> MismatchSubtype:
    """
    Classify how an offered version misses a required range.

    Args:
        required: Range declared by the requirement
        found: Version offered by a candidate

    Returns:
        TOO_OLD below the left bound, TOO_NEW above the right bound,
        DIFFERENT_VERSION otherwise
    """
    if required.is_below(found):
        return MismatchSubtype.TOO_OLD
    if required.is_above(found):
        return MismatchSubtype.TOO_NEW
    return MismatchSubtype.DIFFERENT_VERSION


class ModuleRequirementDiagnoser(ModuleDiagnoser):
    """Matches module requirements against the capability index and classifies failures."""

    def __init__(self, index: CapabilityIndex, include_dependency_chain: bool = True):
        """
        Initialize the diagnoser.

        Args:
            index: Capability index built from the same snapshot as the modules
            include_dependency_chain: Report satisfied requirements whose provider is inactive
        """
        self.index = index
        self.include_dependency_chain = include_dependency_chain

    def diagnose(self, module: Module) -> List[ModuleFinding]:
        """
        Diagnose the requirements of one inactive module.

        Args:
            module: Module believed inactive

        Returns:
            Findings in requirement declaration order. An empty list means the
            module's problem is a lifecycle issue unrelated to packaging.
        """
        findings: List[ModuleFinding] = []

        for requirement in module.requirements:
            if requirement.optional:
                continue
            if module.owns_package(requirement.name):
                logger.debug(f"{module.label}: '{requirement.name}' is provided by the module itself")
                continue

            findings.extend(self._diagnose_requirement(module, requirement))

        logger.debug(f"{module.label}: {len(findings)} findings for {len(module.requirements)} requirements")
        return findings

    def _diagnose_requirement(self, module: Module, requirement: Requirement) -> List[ModuleFinding]:
        """Diagnose a single non-optional, foreign requirement."""
        candidates = self.index.lookup(requirement.name)
        if not candidates:
            return [ModuleFinding(kind=ModuleFindingKind.NOT_EXPORTED_ANYWHERE, name=requirement.name,
                                  required_range=requirement.version_range)]

        if requirement.version_range is None:
            # No specific version required, any export satisfies it
            return self._check_provider(requirement, candidates[0])

        try:
            required = VersionRange.parse(requirement.version_range)
        except MalformedVersionRange as e:
            logger.warning(f"{module.label}: {e}")
            return [
                self._mismatch(requirement, candidate, MismatchSubtype.DIFFERENT_VERSION,
                               len(candidates) > 1, notes=str(e))
                for candidate in candidates
            ]

        mismatches: List[ModuleFinding] = []
        for candidate in candidates:
            try:
                found = Version.parse(candidate.version)
            except InvalidVersion as e:
                logger.warning(f"{module.label}: candidate for '{requirement.name}' has {e}")
                mismatches.append(self._mismatch(requirement, candidate, MismatchSubtype.DIFFERENT_VERSION,
                                                 len(candidates) > 1, notes=str(e)))
                continue

            if required.includes(found):
                return self._check_provider(requirement, candidate)

            mismatches.append(self._mismatch(requirement, candidate, classify_mismatch(required, found),
                                             len(candidates) > 1))

        return mismatches

    def _check_provider(self, requirement: Requirement, satisfying: Capability) -> List[ModuleFinding]:
        """A satisfying export only blocks transitively, through an inactive provider."""
        if not self.include_dependency_chain:
            return []

        provider = self.index.provider_of(satisfying)
        if provider is None or not is_inactive(provider):
            return []

        return [ModuleFinding(
            kind=ModuleFindingKind.DEPENDENCY_CHAIN_INACTIVE,
            name=requirement.name,
            required_range=requirement.version_range,
            found_version=satisfying.version,
            provider_id=provider.id,
            provider_label=provider.label,
            provider_status=status_text(provider)
        )]

    def _mismatch(self, requirement: Requirement, candidate: Capability, subtype: MismatchSubtype,
                  is_candidate: bool, notes: Optional[str] = None) -> ModuleFinding:
        provider = self.index.provider_of(candidate)
        return ModuleFinding(
            kind=ModuleFindingKind.VERSION_MISMATCH,
            name=requirement.name,
            required_range=requirement.version_range,
            found_version=candidate.version,
            provider_id=candidate.provider_id,
            provider_label=provider.label if provider else None,
            provider_status=status_text(provider) if provider else None,
            subtype=subtype,
            candidate=is_candidate,
            notes=notes
        )


def diagnose_module(module: Module, index: CapabilityIndex) -> List[ModuleFinding]:
    """
    Diagnose one module against a capability index.

    Args:
        module: Module believed inactive
        index: Capability index of the same snapshot

    Returns:
        Findings in requirement declaration order
    """
    return ModuleRequirementDiagnoser(index).diagnose(module)
