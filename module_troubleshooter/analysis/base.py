"""
Abstract base classes for diagnosis functionality.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ComponentDescriptor, Module, ModuleFinding, ServiceFinding


class ModuleDiagnoser(ABC):
    """Abstract base class for diagnosing unsatisfied module requirements."""
    
    @abstractmethod
    def diagnose(self, module: Module) -> List[ModuleFinding]:
        """
        Diagnose why the requirements of an inactive module are not satisfied.
        
        Args:
            module: Inactive module to diagnose
            
        Returns:
            Findings in requirement declaration order, empty if packaging is fine
        """
        pass


class ServiceDiagnoser(ABC):
    """Abstract base class for diagnosing unsatisfied component service references."""
    
    @abstractmethod
    def diagnose(self, descriptors: List[ComponentDescriptor],
                 errors: Optional[List[str]] = None) -> List[ServiceFinding]:
        """
        Diagnose which missing services block which components.
        
        Args:
            descriptors: All component descriptors of one snapshot
            errors: Optional list collecting per-component failures
            
        Returns:
            Missing-service findings ranked by number of blocked components
        """
        pass
