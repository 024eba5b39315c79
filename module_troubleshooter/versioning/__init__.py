"""
Versioning Module

Contains version parsing and version range evaluation for module requirements.
"""

from .version_range import Version, VersionRange

__all__ = ['Version', 'VersionRange']
