"""
Abstract base classes for report generation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..exceptions import ReportGenerationError
from ..models import DiagnosticReport


class ReportGenerator(ABC):
    """Abstract base class for report generators."""
    
    @abstractmethod
    def generate_report(self, report: DiagnosticReport, output_path: Optional[str] = None) -> str:
        """
        Generate a report from diagnosis results.
        
        Args:
            report: DiagnosticReport to generate report from
            output_path: Optional path to write report to file
            
        Returns:
            Report content as string
        """
        pass
    
    @abstractmethod
    def get_format_name(self) -> str:
        """
        Get the name of the report format.
        
        Returns:
            String identifier for the report format (e.g., "json", "markdown")
        """
        pass
    
    def _write_output(self, content: str, output_path: Optional[str]) -> None:
        """Write report content to a file if a path is given."""
        if not output_path:
            return
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            raise ReportGenerationError(str(e), self.get_format_name(), output_path) from e
