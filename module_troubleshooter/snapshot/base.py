"""
Snapshot interface between the host runtime and the diagnostic core.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ComponentDescriptor, Configuration, Module


class SnapshotProvider(ABC):
    """Read-only, point-in-time view of a runtime inventory."""
    
    @abstractmethod
    def list_modules(self) -> List[Module]:
        """
        Get all modules with their state and declared capabilities/requirements.
        
        Returns:
            List of Module objects
        """
        pass
    
    @abstractmethod
    def list_component_descriptors(self) -> List[ComponentDescriptor]:
        """
        Get all component descriptors.
        
        Returns:
            List of ComponentDescriptor objects
        """
        pass
    
    @abstractmethod
    def list_configurations(self, descriptor: ComponentDescriptor) -> List[Configuration]:
        """
        Get the live configurations of a component descriptor.
        
        Args:
            descriptor: Component descriptor
            
        Returns:
            List of Configuration objects, empty if no instance is running
        """
        pass
    
    def service_reference_count(self) -> Optional[int]:
        """Number of registered service references, if the host reports it."""
        return None


class InventorySnapshot(SnapshotProvider):
    """In-memory snapshot populated once per diagnostic run."""
    
    def __init__(self, modules: Optional[List[Module]] = None,
                 descriptors: Optional[List[ComponentDescriptor]] = None,
                 service_references: Optional[int] = None,
                 source: Optional[str] = None):
        self._modules = list(modules or [])
        self._descriptors = list(descriptors or [])
        self._service_references = service_references
        self.source = source
    
    def list_modules(self) -> List[Module]:
        return list(self._modules)
    
    def list_component_descriptors(self) -> List[ComponentDescriptor]:
        return list(self._descriptors)
    
    def list_configurations(self, descriptor: ComponentDescriptor) -> List[Configuration]:
        return list(descriptor.configurations)
    
    def service_reference_count(self) -> Optional[int]:
        return self._service_references
