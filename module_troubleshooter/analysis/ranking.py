"""
Ranking of findings by blast radius.
"""

from typing import Dict, Iterable, List, Tuple

from ..index import group_by
from ..models import (
    BlockingModule,
    ModuleDiagnosis,
    ModuleFindingKind,
    ServiceFinding,
    ServiceFindingReason
)


def aggregate_service_findings(blocked: Iterable[Tuple[str, ServiceFindingReason, str]]) -> List[ServiceFinding]:
    """
    Group (service, reason, dependent) observations into one finding per missing service.
    
    Args:
        blocked: Observations of a component blocked by a missing service
        
    Returns:
        One finding per (service, reason) key, unranked. A component
        referencing the same missing service twice is listed once.
    """
    groups = group_by(blocked, lambda entry: (entry[0], entry[1]))
    return [
        ServiceFinding(service_name=service, reason=reason,
                       dependents=list(dict.fromkeys(entry[2] for entry in entries)))
        for (service, reason), entries in groups.items()
    ]


def rank_service_findings(findings: Iterable[ServiceFinding]) -> List[ServiceFinding]:
    """
    Sort missing-service findings, most blocked components first.
    
    Dependents within a finding are sorted by name; findings blocking the same
    number of components are ordered by service name and reason.
    
    Args:
        findings: Aggregated findings
        
    Returns:
        New list of new findings in ranked order
    """
    ranked = [
        ServiceFinding(service_name=f.service_name, reason=f.reason, dependents=sorted(f.dependents),
                       origins=sorted(f.origins))
        for f in findings
    ]
    ranked.sort(key=lambda f: (-len(f.dependents), f.service_name, f.reason.value))
    return ranked


def rank_blocking_modules(diagnoses: Iterable[ModuleDiagnosis]) -> List[BlockingModule]:
    """
    Rank inactive providers by how many inactive modules they block.
    
    Only DEPENDENCY_CHAIN_INACTIVE findings are considered, so the result
    lists the modules to fix first when a whole chain fails to start.
    
    Args:
        diagnoses: Per-module diagnoses of one run
        
    Returns:
        Blocking modules, most dependents first, then by label
    """
    blocking: Dict[int, BlockingModule] = {}
    for diagnosis in diagnoses:
        for finding in diagnosis.findings:
            if finding.kind != ModuleFindingKind.DEPENDENCY_CHAIN_INACTIVE or finding.provider_id is None:
                continue
            entry = blocking.setdefault(finding.provider_id, BlockingModule(
                module_id=finding.provider_id,
                label=finding.provider_label or str(finding.provider_id),
                status=finding.provider_status or "Unknown"
            ))
            if diagnosis.module.label not in entry.dependents:
                entry.dependents.append(diagnosis.module.label)
    
    ranked = list(blocking.values())
    for entry in ranked:
        entry.dependents.sort()
    ranked.sort(key=lambda b: (-len(b.dependents), b.label))
    return ranked
