"""
Core data models for the Module Troubleshooter.

Everything here is a plain data-transfer structure populated once per
diagnostic run from a snapshot of the runtime inventory. The diagnosers only
read these objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ModuleState(Enum):
    """Lifecycle states of a module, owned by the host runtime."""
    UNINSTALLED = "uninstalled"
    INSTALLED = "installed"
    RESOLVED = "resolved"
    STARTING = "starting"
    ACTIVE = "active"
    STOPPING = "stopping"


@dataclass
class Capability:
    """A named, versioned thing a module offers (an exported package)."""
    name: str
    version: str = "0.0.0"
    provider_id: Optional[int] = None


@dataclass
class Requirement:
    """A named, version-ranged thing a module needs (an imported package)."""
    name: str
    version_range: Optional[str] = None  # None means no explicit constraint
    optional: bool = False


@dataclass
class Module:
    """Represents a deployable unit with its declared capabilities and requirements."""
    id: int
    symbolic_name: str
    state: ModuleState
    is_fragment: bool = False
    requirements: List[Requirement] = None
    capabilities: List[Capability] = None
    packages: List[str] = None  # Package names contained in the module itself

    def __post_init__(self):
        """Treat missing collections as empty."""
        if self.requirements is None:
            self.requirements = []
        if self.capabilities is None:
            self.capabilities = []
        if self.packages is None:
            self.packages = []

    def owns_package(self, name: str) -> bool:
        """Check whether the module carries the named package itself."""
        if name in self.packages:
            return True
        return any(capability.name == name for capability in self.capabilities)

    @property
    def label(self) -> str:
        return f"{self.symbolic_name} ({self.id})"


@dataclass
class ServiceReference:
    """A component's declared dependency on a named service interface."""
    name: str
    interface: str
    optional: bool = False


@dataclass
class Configuration:
    """A live instance of a component descriptor."""
    id: int
    state: str = "unknown"
    satisfied_references: List[str] = None

    def __post_init__(self):
        if self.satisfied_references is None:
            self.satisfied_references = []

    def is_satisfied(self, reference_name: str) -> bool:
        return reference_name in self.satisfied_references


@dataclass
class ComponentDescriptor:
    """A managed component description with its service dependencies."""
    name: str
    factory: Optional[str] = None
    configuration_policy: str = "optional"
    service_interfaces: List[str] = None
    references: List[ServiceReference] = None
    configurations: List[Configuration] = None

    def __post_init__(self):
        """Treat missing collections as empty."""
        if self.service_interfaces is None:
            self.service_interfaces = []
        if self.references is None:
            self.references = []
        if self.configurations is None:
            self.configurations = []

    @property
    def requires_configuration(self) -> bool:
        return self.configuration_policy == "require"


class ModuleFindingKind(Enum):
    """Why a requirement of an inactive module is not satisfied."""
    NOT_EXPORTED_ANYWHERE = "not_exported_anywhere"
    DEPENDENCY_CHAIN_INACTIVE = "dependency_chain_inactive"
    VERSION_MISMATCH = "version_mismatch"


class MismatchSubtype(Enum):
    """How an offered version misses the required range."""
    TOO_OLD = "too_old"
    TOO_NEW = "too_new"
    DIFFERENT_VERSION = "different_version"


@dataclass
class ModuleFinding:
    """A single diagnosed problem with one requirement of a module."""
    kind: ModuleFindingKind
    name: str
    required_range: Optional[str] = None
    found_version: Optional[str] = None
    provider_id: Optional[int] = None
    provider_label: Optional[str] = None
    provider_status: Optional[str] = None
    subtype: Optional[MismatchSubtype] = None
    candidate: bool = False  # One of several mismatching candidates
    notes: Optional[str] = None


@dataclass
class ModuleDiagnosis:
    """Diagnosis result for a single inactive module."""
    module: Module
    status: str
    findings: List[ModuleFinding] = field(default_factory=list)
    hint: Optional[str] = None
    error: Optional[str] = None  # Set when diagnosing this module failed


class ServiceFindingReason(Enum):
    """Why a referenced service has no provider."""
    NO_DEFINITION_FOUND = "no component definition in active modules found"
    MISSING_REQUIRED_CONFIGURATION = "missing required config"
    NO_ACTIVE_INSTANCE = "no component instance active"


@dataclass
class ServiceFinding:
    """A missing service together with all components it blocks."""
    service_name: str
    reason: ServiceFindingReason
    dependents: List[str] = field(default_factory=list)
    origins: List[str] = field(default_factory=list)  # Callers seen unregistering the service

    @property
    def key(self) -> str:
        return f"{self.service_name} ({self.reason.value})"


@dataclass
class BlockingModule:
    """An inactive module that blocks other inactive modules transitively."""
    module_id: int
    label: str
    status: str
    dependents: List[str] = field(default_factory=list)


@dataclass
class ModuleStatistics:
    """Lifecycle state counts over all modules of a snapshot."""
    total: int = 0
    active: int = 0
    fragments: int = 0
    resolved: int = 0
    installed: int = 0

    @property
    def all_active(self) -> bool:
        return self.active == self.total or self.active + self.fragments == self.total


@dataclass
class ComponentStatistics:
    """Counts over all component descriptors of a snapshot."""
    descriptors: int = 0
    with_active_instances: int = 0
    total_instances: int = 0
    factories: int = 0
    service_references: Optional[int] = None


@dataclass
class DiagnosticReport:
    """Complete diagnosis of one snapshot."""
    module_statistics: ModuleStatistics
    component_statistics: ComponentStatistics
    modules: List[ModuleDiagnosis]
    services: List[ServiceFinding]
    blocking_modules: List[BlockingModule]
    errors: List[str]
    processing_time: float
    snapshot_source: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def has_issues(self) -> bool:
        return bool(self.modules or self.services or self.errors)
