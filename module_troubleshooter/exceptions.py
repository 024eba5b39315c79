"""
Custom exceptions for the Module Troubleshooter.
"""


class TroubleshooterError(Exception):
    """Base exception class for all Module Troubleshooter errors."""
    pass


class InvalidVersion(TroubleshooterError, ValueError):
    """Raised when a version string cannot be parsed."""
    
    def __init__(self, message: str, version: str = None):
        self.version = version
        
        if version is not None:
            message = f"Invalid version '{version}': {message}"
        
        super().__init__(message)


class MalformedVersionRange(TroubleshooterError, ValueError):
    """Raised when a version range is neither a single version nor a bracketed interval."""
    
    def __init__(self, message: str, range_text: str = None):
        self.range_text = range_text
        
        if range_text is not None:
            message = f"Malformed version range '{range_text}': {message}"
        
        super().__init__(message)


class SnapshotParseError(TroubleshooterError):
    """Raised when an inventory snapshot cannot be read."""
    
    def __init__(self, message: str, file_path: str = None):
        self.file_path = file_path
        
        if file_path:
            message = f"Error parsing snapshot file '{file_path}': {message}"
        
        super().__init__(message)


class ConfigurationError(TroubleshooterError):
    """Raised when configuration is invalid."""
    pass


class ReportGenerationError(TroubleshooterError):
    """Raised when report generation fails."""
    
    def __init__(self, message: str, format_name: str = None, output_path: str = None):
        self.format_name = format_name
        self.output_path = output_path
        
        if format_name:
            message = f"Report generation error for format '{format_name}': {message}"
            if output_path:
                message += f" (output: {output_path})"
        
        super().__init__(message)
