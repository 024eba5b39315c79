"""
Snapshot Module

Contains the read-only inventory interface consumed by the diagnosers, an
in-memory implementation, and loaders for snapshot documents and manifest headers.
"""

from .base import InventorySnapshot, SnapshotProvider
from .header_parser import Clause, capabilities_from_header, parse_header, requirements_from_header
from .loader import SnapshotLoader

__all__ = [
    "SnapshotProvider",
    "InventorySnapshot",
    "SnapshotLoader",
    "Clause",
    "parse_header",
    "requirements_from_header",
    "capabilities_from_header"
]
