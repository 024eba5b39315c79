"""
Human-readable text report generator for diagnosis results.
"""

import os
import re
import sys
from typing import Any, Dict, List, Optional

from .base import ReportGenerator
from .json_reporter import JSONReporter, dependents_preview
from ..models import DiagnosticReport


class HumanReadableReporter(ReportGenerator):
    """
    Human-readable text report generator for console output.
    Uses JSONReporter internally for data structuring and includes color coding.
    """

    # ANSI color codes
    COLORS = {
        'RED': '\033[91m',
        'GREEN': '\033[92m',
        'YELLOW': '\033[93m',
        'BLUE': '\033[94m',
        'CYAN': '\033[96m',
        'BOLD': '\033[1m',
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = None, width: int = 80, detailed: bool = False):
        """
        Initialize human-readable text reporter.

        Args:
            use_colors: Whether to use ANSI color codes. Auto-detects if None.
            width: Console width for formatting (default: 80)
            detailed: List every blocked component instead of a preview
        """
        if use_colors is None:
            self.use_colors = self._supports_color()
        else:
            self.use_colors = use_colors

        self.width = width
        self.detailed = detailed
        self.json_reporter = JSONReporter(include_metadata=True)

    def generate_report(self, report: DiagnosticReport, output_path: Optional[str] = None) -> str:
        """
        Generate human-readable text report from diagnosis results.

        Args:
            report: DiagnosticReport to generate report from
            output_path: Optional path to write report to file

        Returns:
            Text report content as string
        """
        data = self.json_reporter.get_structured_data(report)
        text_content = self._build_text_report(data)

        # Files never get colors
        self._write_output(self._strip_colors(text_content), output_path)
        return text_content

    def get_format_name(self) -> str:
        """Get the name of the report format."""
        return "text"

    def _supports_color(self) -> bool:
        """
        Auto-detect if the terminal supports color output.

        Returns:
            True if colors are supported, False otherwise
        """
        if os.environ.get('NO_COLOR'):
            return False

        if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
            return False

        term = os.environ.get('TERM', '').lower()
        return 'color' in term or term in ['xterm', 'xterm-256color', 'screen']

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors or color not in self.COLORS:
            return text

        return f"{self.COLORS[color]}{text}{self.COLORS['RESET']}"

    def _strip_colors(self, text: str) -> str:
        """Remove ANSI color codes from text."""
        ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
        return ansi_escape.sub('', text)

    def _build_text_report(self, data: Dict[str, Any]) -> str:
        """
        Build complete text report from structured data.

        Args:
            data: Structured report data from JSON reporter

        Returns:
            Complete text report as string
        """
        sections = [
            self._build_header(data),
            self._build_modules_section(data),
        ]

        if data["blocking_modules"]:
            sections.append(self._build_blocking_section(data["blocking_modules"]))

        sections.append(self._build_services_section(data))

        if data["errors"]:
            sections.append(self._build_errors_section(data["errors"]))

        if "metadata" in data:
            sections.append(self._build_footer(data["metadata"], data["summary"]))

        return "\n\n".join(sections)

    def _build_header(self, data: Dict[str, Any]) -> str:
        summary = data["summary"]
        if summary["has_issues"]:
            status_text = self._colorize("PROBLEMS FOUND", "RED")
        else:
            status_text = self._colorize("ALL OK", "GREEN")

        title = f"MODULE TROUBLESHOOT REPORT - {status_text}"
        separator = "=" * min(self.width, len(self._strip_colors(title)))
        lines = [self._colorize(separator, 'BOLD'), self._colorize(title, 'BOLD'), self._colorize(separator, 'BOLD')]

        snapshot = data.get("metadata", {}).get("snapshot")
        if snapshot:
            lines.append(f"Snapshot: {snapshot}")
        return "\n".join(lines)

    def _build_modules_section(self, data: Dict[str, Any]) -> str:
        lines = [self._colorize("MODULES", 'BOLD'), data["summary"]["module_status"], ""]

        if not data["modules"]:
            lines.append(self._colorize("All modules ok.", 'GREEN'))
            return "\n".join(lines)

        for module in data["modules"]:
            lines.append(f"{self._colorize(module['label'], 'CYAN')} {module['status']}")
            if module["hint"]:
                lines.append(f"  {self._colorize(module['hint'], 'YELLOW')}")
            if module["error"]:
                lines.append(f"  {self._colorize('diagnosis failed: ' + module['error'], 'RED')}")
            for finding in module["findings"]:
                color = 'YELLOW' if finding["kind"] == "dependency_chain_inactive" else 'RED'
                lines.append(f"  - {self._colorize(finding['message'], color)}")
            if not module["findings"] and not module["error"]:
                lines.append("  (no unsatisfied requirements, check the module's log for lifecycle errors)")
            lines.append("")

        return "\n".join(lines).rstrip()

    def _build_blocking_section(self, blocking_modules: List[Dict[str, Any]]) -> str:
        lines = [self._colorize("INACTIVE DEPENDENCIES", 'BOLD')]
        for blocking in blocking_modules:
            lines.append(f"{blocking['label']} {blocking['status']} blocks {blocking['blocked_count']} other modules")
            if self.detailed:
                lines.extend(f"    {name}" for name in blocking["dependents"])
        return "\n".join(lines)

    def _build_services_section(self, data: Dict[str, Any]) -> str:
        lines = [self._colorize("COMPONENTS", 'BOLD'), data["summary"]["component_status"], ""]

        if not data["services"]:
            lines.append(self._colorize("No missing services.", 'GREEN'))
            return "\n".join(lines)

        for service in data["services"]:
            lines.append(self._colorize(service["message"], 'RED'))
            if service["origins"]:
                lines.append(f"    unregistered by: {', '.join(service['origins'])}")
            if self.detailed:
                lines.extend(f"    {name}" for name in service["dependents"])
            else:
                lines.append(f"    {dependents_preview(service['dependents'])}")

        return "\n".join(lines)

    def _build_errors_section(self, errors: List[str]) -> str:
        lines = [self._colorize("ERRORS", 'BOLD')]
        lines.extend(f"  {self._colorize(error, 'RED')}" for error in errors)
        return "\n".join(lines)

    def _build_footer(self, metadata: Dict[str, Any], summary: Dict[str, Any]) -> str:
        parts = []
        if metadata.get("tool_version"):
            parts.append(f"module-troubleshooter {metadata['tool_version']}")
        if metadata.get("generated_at"):
            parts.append(f"generated {metadata['generated_at']}")
        parts.append(f"took {summary['processing_time_seconds']}s")
        return "-" * min(self.width, 40) + "\n" + ", ".join(parts)
