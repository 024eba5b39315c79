"""
Index of exported capabilities across the whole module inventory.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..models import Capability, Module
from .multimap import group_by

logger = logging.getLogger(__name__)


class CapabilityIndex:
    """
    Capability name -> providers multimap built from one inventory snapshot.
    
    The same name may be offered by several modules, or by one module at
    several versions. Capabilities of inactive modules are indexed as well so
    that a candidate from an inactive provider can still be reported.
    """
    
    def __init__(self, capabilities: Dict[str, List[Capability]], modules_by_id: Dict[int, Module]):
        self._capabilities = capabilities
        self._modules_by_id = modules_by_id
    
    @classmethod
    def build(cls, modules: Iterable[Module]) -> "CapabilityIndex":
        """
        Build the index from every capability of every module, regardless of state.
        
        Args:
            modules: Modules of the snapshot
            
        Returns:
            CapabilityIndex over all exported capabilities
        """
        modules = list(modules)
        entries: List[Capability] = []
        for module in modules:
            for capability in module.capabilities:
                # Capabilities listed without a provider belong to the declaring module
                if capability.provider_id is None:
                    capability = Capability(capability.name, capability.version, module.id)
                entries.append(capability)
        
        modules_by_id = {module.id: module for module in modules}
        index = cls(group_by(entries, lambda c: c.name), modules_by_id)
        logger.debug(f"Indexed {len(entries)} capabilities under {len(index)} names from {len(modules)} modules")
        return index
    
    def lookup(self, name: str) -> List[Capability]:
        """
        Get all capabilities offered under a name.
        
        Args:
            name: Capability name
            
        Returns:
            List of capabilities, empty if nothing offers the name
        """
        return list(self._capabilities.get(name, []))
    
    def provider_of(self, capability: Capability) -> Optional[Module]:
        """Resolve the module providing a capability, if it is part of the snapshot."""
        if capability.provider_id is None:
            return None
        return self._modules_by_id.get(capability.provider_id)
    
    def names(self) -> List[str]:
        return list(self._capabilities)
    
    def __len__(self) -> int:
        return len(self._capabilities)
    
    def __contains__(self, name: str) -> bool:
        return name in self._capabilities
