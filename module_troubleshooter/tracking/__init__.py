"""
Tracking Module

Contains the service origin tracker, an observer independent of the diagnosers.
"""

from .origin_tracker import (
    OriginRecord,
    ServiceEvent,
    ServiceEventType,
    ServiceOriginTracker,
    resolve_origin
)

__all__ = ['ServiceOriginTracker', 'ServiceEvent', 'ServiceEventType', 'OriginRecord', 'resolve_origin']
