"""
JSON report generator for diagnosis results.
"""

import json
from typing import Any, Dict, List, Optional

from .base import ReportGenerator
from ..models import (
    BlockingModule,
    ComponentStatistics,
    DiagnosticReport,
    MismatchSubtype,
    ModuleDiagnosis,
    ModuleFinding,
    ModuleFindingKind,
    ModuleStatistics,
    ServiceFinding
)

MISMATCH_TEXT = {
    MismatchSubtype.TOO_OLD: "dependency too old",
    MismatchSubtype.TOO_NEW: "dependency too new",
    MismatchSubtype.DIFFERENT_VERSION: "dependency with different version",
}


def describe_finding(finding: ModuleFinding) -> str:
    """
    Render a module finding as a one-line message.

    Args:
        finding: Finding to describe

    Returns:
        Message such as "dependency too new: com.example.api (7) (importing
        com.example.api [1.0,2.0) but found 2.0.0)"
    """
    if finding.kind == ModuleFindingKind.NOT_EXPORTED_ANYWHERE:
        return f"not exported by any module: {finding.name}"

    provider = finding.provider_label or "unknown module"
    if finding.kind == ModuleFindingKind.DEPENDENCY_CHAIN_INACTIVE:
        return f"dependency not active: {provider} {finding.provider_status} (importing {finding.name})"

    prefix = "candidate " if finding.candidate else ""
    message = (f"{prefix}{MISMATCH_TEXT[finding.subtype]}: {provider} "
               f"(importing {finding.name} {finding.required_range} but found {finding.found_version})")
    if finding.notes:
        message += f" [{finding.notes}]"
    return message


def describe_service(finding: ServiceFinding) -> str:
    """Render a missing-service finding as a one-line message."""
    return f"missing service: {finding.key} blocks {len(finding.dependents)} other components"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def module_status_line(stats: ModuleStatistics) -> str:
    """
    Summarize module states in one line.

    Args:
        stats: Module statistics of a snapshot

    Returns:
        Line such as "Module information: 3 modules in total, 2 modules active,
        1 module installed."
    """
    line = f"Module information: {_plural(stats.total, 'module')} in total"
    if stats.all_active:
        return f"{line} - all {_plural(stats.total, 'module')} active."

    parts = []
    if stats.active:
        parts.append(f"{_plural(stats.active, 'module')} active")
    if stats.fragments:
        parts.append(f"{_plural(stats.fragments, 'module')} active fragments")
    if stats.resolved:
        parts.append(f"{_plural(stats.resolved, 'module')} resolved")
    if stats.installed:
        parts.append(f"{_plural(stats.installed, 'module')} installed")
    return ", ".join([line] + parts) + "."


def component_status_line(stats: ComponentStatistics) -> str:
    """Summarize component descriptors and instances in one line."""
    parts = [
        f"{stats.descriptors} different components",
        f"{stats.with_active_instances} active components",
        f"{stats.total_instances} active instances",
        f"{stats.factories} factory components",
    ]
    if stats.service_references is not None:
        parts.append(f"{stats.service_references} service references")
    return "Component information: " + ", ".join(parts)


class JSONReporter(ReportGenerator):
    """
    JSON report generator that serves as the foundation for all other report formats.
    """

    def __init__(self, include_metadata: bool = True, pretty_print: bool = True):
        """
        Initialize JSON reporter.

        Args:
            include_metadata: Whether to include metadata like timestamps
            pretty_print: Whether to format JSON with indentation
        """
        self.include_metadata = include_metadata
        self.pretty_print = pretty_print

    def generate_report(self, report: DiagnosticReport, output_path: Optional[str] = None) -> str:
        """
        Generate JSON report from diagnosis results.

        Args:
            report: DiagnosticReport to generate report from
            output_path: Optional path to write report to file

        Returns:
            JSON report content as string
        """
        report_data = self.get_structured_data(report)

        if self.pretty_print:
            json_content = json.dumps(report_data, indent=2, ensure_ascii=False)
        else:
            json_content = json.dumps(report_data, ensure_ascii=False)

        self._write_output(json_content, output_path)
        return json_content

    def get_format_name(self) -> str:
        """Get the name of the report format."""
        return "json"

    def get_structured_data(self, report: DiagnosticReport) -> Dict[str, Any]:
        """
        Build the complete report data structure.

        Args:
            report: Diagnosis results to structure

        Returns:
            Dictionary containing structured report data
        """
        data = {
            "summary": self._build_summary(report),
            "statistics": self._build_statistics(report),
            "modules": [self._build_module(d) for d in report.modules],
            "blocking_modules": [self._build_blocking_module(b) for b in report.blocking_modules],
            "services": [self._build_service(s) for s in report.services],
            "errors": list(report.errors)
        }

        if self.include_metadata:
            metadata = dict(report.metadata)
            if report.snapshot_source:
                metadata["snapshot"] = report.snapshot_source
            data["metadata"] = metadata

        return data

    def _build_summary(self, report: DiagnosticReport) -> Dict[str, Any]:
        return {
            "module_status": module_status_line(report.module_statistics),
            "component_status": component_status_line(report.component_statistics),
            "inactive_modules": len(report.modules),
            "modules_with_findings": sum(1 for d in report.modules if d.findings),
            "missing_services": len(report.services),
            "blocked_components": len({name for s in report.services for name in s.dependents}),
            "has_issues": report.has_issues,
            "processing_time_seconds": round(report.processing_time, 3)
        }

    def _build_statistics(self, report: DiagnosticReport) -> Dict[str, Any]:
        modules = report.module_statistics
        components = report.component_statistics
        return {
            "modules": {
                "total": modules.total,
                "active": modules.active,
                "fragments": modules.fragments,
                "resolved": modules.resolved,
                "installed": modules.installed,
                "all_active": modules.all_active
            },
            "components": {
                "descriptors": components.descriptors,
                "with_active_instances": components.with_active_instances,
                "total_instances": components.total_instances,
                "factories": components.factories,
                "service_references": components.service_references
            }
        }

    def _build_module(self, diagnosis: ModuleDiagnosis) -> Dict[str, Any]:
        module = diagnosis.module
        return {
            "id": module.id,
            "symbolic_name": module.symbolic_name,
            "label": module.label,
            "state": module.state.value,
            "status": diagnosis.status,
            "fragment": module.is_fragment,
            "hint": diagnosis.hint,
            "error": diagnosis.error,
            "findings": [self._build_finding(f) for f in diagnosis.findings]
        }

    def _build_finding(self, finding: ModuleFinding) -> Dict[str, Any]:
        data = {
            "kind": finding.kind.value,
            "name": finding.name,
            "required_range": finding.required_range,
            "found_version": finding.found_version,
            "subtype": finding.subtype.value if finding.subtype else None,
            "candidate": finding.candidate,
            "notes": finding.notes,
            "message": describe_finding(finding)
        }
        if finding.provider_id is not None:
            data["provider"] = {
                "id": finding.provider_id,
                "label": finding.provider_label,
                "status": finding.provider_status
            }
        return data

    def _build_blocking_module(self, blocking: BlockingModule) -> Dict[str, Any]:
        return {
            "id": blocking.module_id,
            "label": blocking.label,
            "status": blocking.status,
            "blocked_count": len(blocking.dependents),
            "dependents": list(blocking.dependents)
        }

    def _build_service(self, finding: ServiceFinding) -> Dict[str, Any]:
        return {
            "service": finding.service_name,
            "reason": finding.reason.value,
            "reason_code": finding.reason.name.lower(),
            "key": finding.key,
            "blocked_count": len(finding.dependents),
            "dependents": list(finding.dependents),
            "origins": list(finding.origins),
            "message": describe_service(finding)
        }


def dependents_preview(dependents: List[str], limit: int = 5) -> str:
    """Comma separated preview of dependent names."""
    shown = ", ".join(dependents[:limit])
    if len(dependents) > limit:
        shown += f", ... (+{len(dependents) - limit} more)"
    return shown
