"""
Loader for inventory snapshots exported from a host runtime.

Snapshots are JSON or YAML documents of the form::

    modules:
      - id: 12
        symbolic_name: com.example.orders
        state: installed
        fragment: false
        headers:
          Import-Package: 'com.example.api;version="[1.0,2.0)"'
          Export-Package: 'com.example.orders;version=1.2.0'
        packages: [com.example.orders.internal]
    components:
      - name: com.example.orders.OrderService
        configuration_policy: optional
        service_interfaces: [com.example.api.Orders]
        references:
          - {name: store, interface: com.example.api.Store}
        configurations:
          - {id: 3, state: unsatisfied_reference, satisfied_references: []}
    service_references: 120

Requirements and capabilities may also be listed explicitly under
``requirements`` and ``capabilities``; explicit entries come after the ones
parsed from headers.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from ..exceptions import SnapshotParseError
from ..models import (
    Capability,
    ComponentDescriptor,
    Configuration,
    Module,
    ModuleState,
    Requirement,
    ServiceReference
)
from .base import InventorySnapshot
from .header_parser import capabilities_from_header, requirements_from_header

logger = logging.getLogger(__name__)

IMPORT_HEADER = "Import-Package"
EXPORT_HEADER = "Export-Package"
FRAGMENT_HOST_HEADER = "Fragment-Host"

# Numeric lifecycle codes some runtimes report instead of names
STATE_CODES = {
    1: ModuleState.UNINSTALLED,
    2: ModuleState.INSTALLED,
    4: ModuleState.RESOLVED,
    8: ModuleState.STARTING,
    16: ModuleState.STOPPING,
    32: ModuleState.ACTIVE,
}


class SnapshotLoader:
    """Reads snapshot documents into an InventorySnapshot."""

    SUPPORTED_EXTENSIONS = ('.json', '.yaml', '.yml')

    def load(self, file_path: str) -> InventorySnapshot:
        """
        Load a snapshot file.

        Args:
            file_path: Path to a JSON or YAML snapshot

        Returns:
            InventorySnapshot with all modules and component descriptors

        Raises:
            FileNotFoundError: If the file doesn't exist
            SnapshotParseError: If the file can't be read or is not a valid snapshot
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Snapshot file not found: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                if file_path.lower().endswith('.json'):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except json.JSONDecodeError as e:
            raise SnapshotParseError(f"Invalid JSON: {e}", file_path)
        except yaml.YAMLError as e:
            raise SnapshotParseError(f"Invalid YAML: {e}", file_path)
        except OSError as e:
            raise SnapshotParseError(f"Error reading file: {e}", file_path)

        try:
            snapshot = self.load_data(data, source=file_path)
        except SnapshotParseError as e:
            if e.file_path:
                raise
            raise SnapshotParseError(str(e), file_path) from e

        logger.info(f"Loaded snapshot from {file_path}: {len(snapshot.list_modules())} modules, "
                    f"{len(snapshot.list_component_descriptors())} components")
        return snapshot

    def load_data(self, data: Any, source: Optional[str] = None) -> InventorySnapshot:
        """
        Build a snapshot from already parsed data.

        Args:
            data: Parsed snapshot document
            source: Optional description of where the data came from

        Returns:
            InventorySnapshot

        Raises:
            SnapshotParseError: If the data is not a valid snapshot
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SnapshotParseError("Snapshot must be a mapping with 'modules' and 'components'")

        modules = [self._parse_module(entry, i) for i, entry in enumerate(data.get('modules') or [])]
        descriptors = [self._parse_descriptor(entry, i) for i, entry in enumerate(data.get('components') or [])]

        service_references = data.get('service_references')
        if service_references is not None and not isinstance(service_references, int):
            raise SnapshotParseError(f"'service_references' must be an integer, got {service_references!r}")

        return InventorySnapshot(modules, descriptors, service_references=service_references, source=source)

    def _parse_module(self, entry: Dict[str, Any], position: int) -> Module:
        """Parse one module entry."""
        if not isinstance(entry, dict):
            raise SnapshotParseError(f"Module entry {position} must be a mapping")
        if 'id' not in entry:
            raise SnapshotParseError(f"Module entry {position} missing 'id' field")

        module_id = entry['id']
        symbolic_name = entry.get('symbolic_name') or entry.get('name') or str(module_id)
        headers = self._mapping(entry.get('headers') or {}, f"headers of module {symbolic_name}")
        for header, value in headers.items():
            if value is not None and not isinstance(value, str):
                raise SnapshotParseError(f"Header '{header}' of module {symbolic_name} must be a string")

        try:
            requirements = requirements_from_header(headers.get(IMPORT_HEADER))
            capabilities = capabilities_from_header(headers.get(EXPORT_HEADER), module_id)
        except SnapshotParseError as e:
            raise SnapshotParseError(f"Module {symbolic_name} ({module_id}): {e}") from e

        for req in entry.get('requirements') or []:
            requirements.append(Requirement(
                name=self._require(req, 'name', f"requirement of module {symbolic_name}"),
                version_range=self._optional_text(req.get('version')),
                optional=bool(req.get('optional', False))
            ))

        for cap in entry.get('capabilities') or []:
            capabilities.append(Capability(
                name=self._require(cap, 'name', f"capability of module {symbolic_name}"),
                version=self._optional_text(cap.get('version')) or "0.0.0",
                provider_id=module_id
            ))

        is_fragment = entry.get('fragment')
        if is_fragment is None:
            is_fragment = headers.get(FRAGMENT_HOST_HEADER) is not None

        return Module(
            id=module_id,
            symbolic_name=symbolic_name,
            state=self._parse_state(entry.get('state'), symbolic_name),
            is_fragment=bool(is_fragment),
            requirements=requirements,
            capabilities=capabilities,
            packages=list(entry.get('packages') or [])
        )

    def _parse_state(self, value: Any, module_name: str) -> ModuleState:
        """Accept lifecycle names in any case or numeric lifecycle codes."""
        if isinstance(value, int) and value in STATE_CODES:
            return STATE_CODES[value]
        if isinstance(value, str):
            try:
                return ModuleState(value.strip().lower())
            except ValueError:
                pass
        raise SnapshotParseError(f"Module {module_name} has unknown state {value!r}")

    def _parse_descriptor(self, entry: Dict[str, Any], position: int) -> ComponentDescriptor:
        """Parse one component descriptor entry."""
        if not isinstance(entry, dict):
            raise SnapshotParseError(f"Component entry {position} must be a mapping")
        name = self._require(entry, 'name', f"component entry {position}")

        references = []
        for i, ref in enumerate(entry.get('references') or []):
            ref = self._mapping(ref, f"reference {i} of component {name}")
            interface = ref.get('interface') or ref.get('interface_name')
            if not interface:
                raise SnapshotParseError(f"Reference of component {name} missing 'interface' field")
            references.append(ServiceReference(
                name=ref.get('name') or interface,
                interface=interface,
                optional=self._is_optional_reference(ref)
            ))

        configurations = []
        for i, conf in enumerate(entry.get('configurations') or []):
            conf = self._mapping(conf, f"configuration {i} of component {name}")
            satisfied = []
            for sat in conf.get('satisfied_references') or []:
                satisfied.append(sat.get('name') if isinstance(sat, dict) else sat)
            configurations.append(Configuration(
                id=conf.get('id', i),
                state=str(conf.get('state', 'unknown')),
                satisfied_references=satisfied
            ))

        return ComponentDescriptor(
            name=name,
            factory=entry.get('factory'),
            configuration_policy=entry.get('configuration_policy') or "optional",
            service_interfaces=list(entry.get('service_interfaces') or []),
            references=references,
            configurations=configurations
        )

    @staticmethod
    def _is_optional_reference(ref: Dict[str, Any]) -> bool:
        if 'optional' in ref:
            return bool(ref['optional'])
        cardinality = str(ref.get('cardinality') or "1..1")
        return cardinality.startswith('0')

    @staticmethod
    def _mapping(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise SnapshotParseError(f"Expected a mapping for {context}, got {value!r}")
        return value

    @staticmethod
    def _require(entry: Any, key: str, context: str) -> str:
        if not isinstance(entry, dict) or not entry.get(key):
            raise SnapshotParseError(f"Missing '{key}' field in {context}")
        return str(entry[key])

    @staticmethod
    def _optional_text(value: Any) -> Optional[str]:
        # YAML turns an unquoted 1.0 into a float
        if value is None:
            return None
        return str(value)
