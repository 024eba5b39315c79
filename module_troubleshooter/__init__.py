"""
Module Troubleshooter

A Python tool for diagnosing why the modules and managed components of a
modular runtime are not running, from a snapshot of the runtime inventory.
"""

__version__ = "0.1.0"
__author__ = "Module Troubleshooter Team"

# Make version easily importable
def get_version():
    """Get the current version of the Module Troubleshooter."""
    return __version__

__all__ = ['get_version']
