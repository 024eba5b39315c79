"""
Index Module

Contains the capability index and group-by helpers used by the diagnosers.
"""

from .capability_index import CapabilityIndex
from .multimap import group_by, group_by_each

__all__ = ['CapabilityIndex', 'group_by', 'group_by_each']
