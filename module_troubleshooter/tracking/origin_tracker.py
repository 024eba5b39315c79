"""
Observer recording which code unregisters services.

Runs independently of the diagnosers: it is attached to the host's service
registry as a listener and publishes into its own append-only log.
"""

import logging
import sys
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Deque, Dict, FrozenSet, List, Optional, Protocol, Set

from ..config import TrackingConfig

logger = logging.getLogger(__name__)

UNKNOWN_ORIGIN = "unknown"


class ServiceEventType(Enum):
    REGISTERED = "registered"
    MODIFIED = "modified"
    UNREGISTERING = "unregistering"


@dataclass
class ServiceEvent:
    """A service registry event as delivered by the host."""
    type: ServiceEventType
    interfaces: List[str]
    # Qualified names of the callers, innermost first; taken from the Python stack when absent
    stack: Optional[List[str]] = None


@dataclass
class OriginRecord:
    """One entry of the origin log."""
    interface: str
    origin: str
    event_type: ServiceEventType
    timestamp: datetime = field(default_factory=datetime.now)


class ServiceRegistry(Protocol):
    """The part of a host service registry the tracker needs."""

    def add_service_listener(self, listener) -> None:
        ...

    def remove_service_listener(self, listener) -> None:
        ...


def resolve_origin(stack: List[str], skip_prefixes: List[str], collapse_prefixes: Dict[str, str]) -> Optional[str]:
    """
    Find the first caller outside the tracker and the framework.

    Args:
        stack: Qualified caller names, innermost first
        skip_prefixes: Prefixes of framework entries to skip
        collapse_prefixes: Prefix -> short label for well-known callers

    Returns:
        Origin name, a collapsed label, or None if every entry was skipped
    """
    for entry in stack:
        if any(entry.startswith(prefix) for prefix in skip_prefixes):
            continue
        for prefix, label in collapse_prefixes.items():
            if entry.startswith(prefix):
                return label
        return entry
    return None


def _python_stack() -> List[str]:
    """Qualified names of the current Python call stack, innermost first."""
    names = []
    frame = sys._getframe(1)
    while frame is not None:
        module = frame.f_globals.get('__name__', '?')
        names.append(f"{module}.{frame.f_code.co_name}")
        frame = frame.f_back
    return names


class ServiceOriginTracker:
    """
    Tracks which callers unregister services.

    Safe to call from the host's event threads.
    """

    def __init__(self, config: Optional[TrackingConfig] = None):
        self.config = config or TrackingConfig()
        self._lock = threading.Lock()
        self._origins: Dict[str, Set[str]] = {}
        max_entries = self.config.max_log_entries or None
        self._log: Deque[OriginRecord] = deque(maxlen=max_entries)

    def start(self, registry: ServiceRegistry) -> None:
        """Attach the tracker to a service registry."""
        logger.info("Start tracking services")
        registry.add_service_listener(self)

    def stop(self, registry: ServiceRegistry) -> None:
        """Detach the tracker from a service registry."""
        registry.remove_service_listener(self)
        logger.info("Stopped tracking services")

    def service_changed(self, event: ServiceEvent) -> None:
        """
        Record the origin of an unregistering service.

        Args:
            event: Service registry event; other event types are ignored
        """
        if event.type != ServiceEventType.UNREGISTERING:
            return

        stack = event.stack if event.stack is not None else _python_stack()
        origin = resolve_origin(stack, self.config.skip_prefixes, self.config.collapse_prefixes) or UNKNOWN_ORIGIN

        with self._lock:
            for interface in event.interfaces:
                logger.info(f"{interface} -> {origin}")
                self._origins.setdefault(interface, set()).add(origin)
                self._log.append(OriginRecord(interface=interface, origin=origin, event_type=event.type))

    def get_origins(self, interface: str) -> FrozenSet[str]:
        """
        Get every origin seen unregistering a service interface.

        Args:
            interface: Service interface name

        Returns:
            Set of origins, empty if the interface was never unregistered
        """
        with self._lock:
            return frozenset(self._origins.get(interface, ()))

    def records(self) -> List[OriginRecord]:
        """Snapshot of the origin log, oldest first."""
        with self._lock:
            return list(self._log)
