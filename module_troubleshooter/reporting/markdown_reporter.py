"""
Markdown report generator for diagnosis results.
"""

from typing import Any, Dict, List, Optional

from .base import ReportGenerator
from .json_reporter import JSONReporter
from ..models import DiagnosticReport


class MarkdownReporter(ReportGenerator):
    """
    Markdown report generator for sharing diagnosis results in tickets and chats.
    Uses JSONReporter internally for data structuring.
    """
    
    def __init__(self, include_metadata: bool = True):
        """
        Initialize Markdown reporter.
        
        Args:
            include_metadata: Whether to include metadata section
        """
        self.include_metadata = include_metadata
        self.json_reporter = JSONReporter(include_metadata=include_metadata)
    
    def generate_report(self, report: DiagnosticReport, output_path: Optional[str] = None) -> str:
        """
        Generate Markdown report from diagnosis results.
        
        Args:
            report: DiagnosticReport to generate report from
            output_path: Optional path to write report to file
            
        Returns:
            Markdown report content as string
        """
        data = self.json_reporter.get_structured_data(report)
        
        sections = [
            "# Module Troubleshoot Report",
            self._build_modules_section(data),
            self._build_services_section(data),
        ]
        if data["errors"]:
            sections.append(self._build_errors_section(data["errors"]))
        if self.include_metadata and "metadata" in data:
            sections.append(self._build_metadata_section(data["metadata"]))
        
        markdown_content = "\n\n".join(sections) + "\n"
        self._write_output(markdown_content, output_path)
        return markdown_content
    
    def get_format_name(self) -> str:
        """Get the name of the report format."""
        return "markdown"
    
    def _build_modules_section(self, data: Dict[str, Any]) -> str:
        lines = ["## Modules", "", data["summary"]["module_status"]]
        
        if not data["modules"]:
            lines.extend(["", "All modules ok."])
            return "\n".join(lines)
        
        for module in data["modules"]:
            lines.extend(["", f"### {module['label']} ({module['status']})"])
            if module["hint"]:
                lines.append(f"> {module['hint']}")
            if module["error"]:
                lines.append(f"**Diagnosis failed:** {module['error']}")
            for finding in module["findings"]:
                lines.append(f"- {finding['message']}")
        
        if data["blocking_modules"]:
            lines.extend(["", "### Inactive dependencies", "", "| Module | Status | Blocks |", "|---|---|---|"])
            for blocking in data["blocking_modules"]:
                lines.append(f"| {blocking['label']} | {blocking['status']} | {blocking['blocked_count']} |")
        
        return "\n".join(lines)
    
    def _build_services_section(self, data: Dict[str, Any]) -> str:
        lines = ["## Components", "", data["summary"]["component_status"]]
        
        if not data["services"]:
            lines.extend(["", "No missing services."])
            return "\n".join(lines)
        
        lines.extend(["", "| Missing service | Reason | Blocked components |", "|---|---|---|"])
        for service in data["services"]:
            lines.append(f"| `{service['service']}` | {service['reason']} | {service['blocked_count']} |")
        
        for service in data["services"]:
            lines.extend(["", f"<details><summary>{service['key']}</summary>", ""])
            lines.extend(f"- {name}" for name in service["dependents"])
            lines.extend(["", "</details>"])
        
        return "\n".join(lines)
    
    def _build_errors_section(self, errors: List[str]) -> str:
        return "\n".join(["## Errors", ""] + [f"- {error}" for error in errors])
    
    def _build_metadata_section(self, metadata: Dict[str, Any]) -> str:
        lines = ["---", ""]
        for key, value in metadata.items():
            lines.append(f"- **{key}**: {value}")
        return "\n".join(lines)
