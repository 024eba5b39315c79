"""
Diagnostic engine running all diagnosers over one inventory snapshot.
"""

import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from ..config import DiagnosisConfig
from ..index import CapabilityIndex
from ..models import (
    ComponentDescriptor,
    ComponentStatistics,
    DiagnosticReport,
    Module,
    ModuleDiagnosis,
    ModuleState,
    ModuleStatistics
)
from ..snapshot import SnapshotProvider
from ..tracking import ServiceOriginTracker
from ..version import get_version
from .inactivity import is_inactive, state_hint, status_text
from .module_diagnoser import ModuleRequirementDiagnoser
from .ranking import rank_blocking_modules
from .service_diagnoser import ComponentServiceDiagnoser

logger = logging.getLogger(__name__)


class TroubleshootEngine:
    """
    Runs one diagnosis over a snapshot: inactive modules first, then components.

    The engine keeps no state between runs. A failure while diagnosing one
    module or component is recorded on that unit and in the report errors;
    the remaining units are still diagnosed.
    """

    def __init__(self, config: Optional[DiagnosisConfig] = None,
                 origin_tracker: Optional[ServiceOriginTracker] = None):
        """
        Initialize the engine.

        Args:
            config: Optional diagnosis settings
            origin_tracker: Optional tracker whose recorded origins annotate missing services
        """
        self.config = config or DiagnosisConfig()
        self.origin_tracker = origin_tracker

    def run(self, snapshot: SnapshotProvider) -> DiagnosticReport:
        """
        Diagnose a snapshot.

        Args:
            snapshot: Read-only inventory snapshot

        Returns:
            DiagnosticReport with per-module diagnoses and ranked service findings
        """
        start_time = time.time()
        errors: List[str] = []

        modules = snapshot.list_modules()
        descriptors = self._collect_descriptors(snapshot, errors)

        logger.info(f"Starting diagnosis of {len(modules)} modules and {len(descriptors)} components")

        index = CapabilityIndex.build(modules)
        diagnoser = ModuleRequirementDiagnoser(index, include_dependency_chain=self.config.include_dependency_chain)

        diagnoses: List[ModuleDiagnosis] = []
        for module in modules:
            # Evaluated against this snapshot only, never carried over between runs
            if not is_inactive(module):
                continue
            diagnoses.append(self._diagnose_module(diagnoser, module, errors))

        services = []
        if self.config.diagnose_services:
            services = ComponentServiceDiagnoser().diagnose(descriptors, errors)
            if self.origin_tracker is not None:
                for finding in services:
                    finding.origins = sorted(self.origin_tracker.get_origins(finding.service_name))

        processing_time = time.time() - start_time
        logger.info(f"Diagnosis finished in {processing_time:.3f}s: {len(diagnoses)} inactive modules, "
                    f"{len(services)} missing services, {len(errors)} errors")

        return DiagnosticReport(
            module_statistics=module_statistics(modules),
            component_statistics=component_statistics(descriptors, snapshot.service_reference_count()),
            modules=diagnoses,
            services=services,
            blocking_modules=rank_blocking_modules(diagnoses),
            errors=errors,
            processing_time=processing_time,
            snapshot_source=getattr(snapshot, 'source', None),
            metadata={
                "generated_at": datetime.now().isoformat(),
                "tool_version": get_version(),
            }
        )

    def _diagnose_module(self, diagnoser: ModuleRequirementDiagnoser, module: Module,
                         errors: List[str]) -> ModuleDiagnosis:
        """Diagnose one module, turning a failure into an error marker."""
        diagnosis = ModuleDiagnosis(
            module=module,
            status=status_text(module),
            hint=state_hint(module) if self.config.include_state_hints else None
        )
        try:
            diagnosis.findings = diagnoser.diagnose(module)
        except Exception as e:
            error_msg = f"Error diagnosing module {module.label}: {str(e)}"
            logger.error(error_msg)
            errors.append(error_msg)
            diagnosis.error = str(e)
        return diagnosis

    def _collect_descriptors(self, snapshot: SnapshotProvider, errors: List[str]) -> List[ComponentDescriptor]:
        """Attach the live configurations the snapshot reports to each descriptor."""
        descriptors = []
        for descriptor in snapshot.list_component_descriptors():
            try:
                configurations = snapshot.list_configurations(descriptor)
            except Exception as e:
                error_msg = f"Error listing configurations of component {descriptor.name}: {str(e)}"
                logger.error(error_msg)
                errors.append(error_msg)
                configurations = []
            descriptors.append(replace(descriptor, configurations=list(configurations or [])))
        return descriptors


def module_statistics(modules: List[Module]) -> ModuleStatistics:
    """
    Count modules per lifecycle state.

    Args:
        modules: All modules of a snapshot

    Returns:
        ModuleStatistics where resolved fragments count as fragments, not as resolved
    """
    stats = ModuleStatistics(total=len(modules))
    for module in modules:
        if module.state == ModuleState.ACTIVE:
            stats.active += 1
        elif module.state == ModuleState.INSTALLED:
            stats.installed += 1
        elif module.state == ModuleState.RESOLVED:
            if module.is_fragment:
                stats.fragments += 1
            else:
                stats.resolved += 1
    return stats


def component_statistics(descriptors: List[ComponentDescriptor],
                         service_references: Optional[int] = None) -> ComponentStatistics:
    """
    Count component descriptors and their running instances.

    Args:
        descriptors: All component descriptors with configurations attached
        service_references: Registered service references, if known

    Returns:
        ComponentStatistics
    """
    stats = ComponentStatistics(descriptors=len(descriptors), service_references=service_references)
    for descriptor in descriptors:
        count = len(descriptor.configurations)
        if count > 0:
            stats.with_active_instances += 1
        stats.total_instances += count
        if descriptor.factory is not None:
            stats.factories += 1
    return stats
