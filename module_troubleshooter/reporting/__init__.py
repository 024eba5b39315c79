"""
Reporting Module

Contains report generators for different output formats (JSON, text, Markdown).
"""

from typing import Optional

from ..config import OutputConfig
from ..exceptions import ReportGenerationError
from .base import ReportGenerator
from .json_reporter import JSONReporter, describe_finding, describe_service
from .markdown_reporter import MarkdownReporter
from .text_reporter import HumanReadableReporter


def create_reporter(format_name: str, output_config: Optional[OutputConfig] = None) -> ReportGenerator:
    """
    Create a report generator for a format.
    
    Args:
        format_name: One of "text", "json" or "markdown"
        output_config: Optional output settings
        
    Returns:
        ReportGenerator for the format
        
    Raises:
        ReportGenerationError: If the format is not supported
    """
    output_config = output_config or OutputConfig()
    
    if format_name == "json":
        return JSONReporter(include_metadata=output_config.include_metadata,
                            pretty_print=output_config.pretty_print)
    if format_name == "text":
        return HumanReadableReporter(use_colors=output_config.use_colors, detailed=output_config.detailed)
    if format_name == "markdown":
        return MarkdownReporter(include_metadata=output_config.include_metadata)
    
    raise ReportGenerationError("unsupported format", format_name)


__all__ = [
    'ReportGenerator',
    'JSONReporter',
    'HumanReadableReporter',
    'MarkdownReporter',
    'create_reporter',
    'describe_finding',
    'describe_service'
]
