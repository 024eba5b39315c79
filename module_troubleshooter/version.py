"""
Version management for the Module Troubleshooter.
"""

from . import __version__


def get_version() -> str:
    """
    Get the current version of the Module Troubleshooter.
    
    Returns:
        Version string (e.g., "0.1.0")
    """
    return __version__


def get_full_name_with_version() -> str:
    """
    Get the full tool name with version.
    
    Returns:
        Full name string (e.g., "Module Troubleshooter v0.1.0")
    """
    return f"Module Troubleshooter v{__version__}"
