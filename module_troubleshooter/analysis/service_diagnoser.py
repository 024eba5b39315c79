"""
Diagnosis of components that fail to activate because of missing services.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..index import group_by, group_by_each
from ..models import ComponentDescriptor, ServiceFindingReason, ServiceFinding
from .base import ServiceDiagnoser
from .ranking import aggregate_service_findings, rank_service_findings

logger = logging.getLogger(__name__)


class ComponentServiceDiagnoser(ServiceDiagnoser):
    """
    Finds unsatisfied service references and groups the blocked components by missing service.
    """
    
    def diagnose(self, descriptors: List[ComponentDescriptor],
                 errors: Optional[List[str]] = None) -> List[ServiceFinding]:
        """
        Diagnose all component descriptors of one snapshot.
        
        Args:
            descriptors: All component descriptors with their live configurations
            errors: Optional list collecting per-component failures
            
        Returns:
            Missing-service findings, most blocked components first
        """
        descriptors = list(descriptors)
        
        # service interface name -> components implementing it
        providers_by_service = group_by_each(descriptors, lambda d: d.service_interfaces)
        descriptors_by_name = group_by(descriptors, lambda d: d.name)
        
        blocked: List[Tuple[str, ServiceFindingReason, str]] = []
        for descriptor in descriptors:
            try:
                for service_name, reason in self._missing_services(descriptor, providers_by_service,
                                                                   descriptors_by_name):
                    blocked.append((service_name, reason, descriptor.name))
            except Exception as e:
                error_msg = f"Error diagnosing component {descriptor.name}: {str(e)}"
                logger.error(error_msg)
                if errors is not None:
                    errors.append(error_msg)
        
        findings = rank_service_findings(aggregate_service_findings(blocked))
        logger.info(f"Found {len(findings)} missing services blocking components "
                    f"across {len(descriptors)} component descriptors")
        return findings
    
    def _missing_services(self, descriptor: ComponentDescriptor,
                          providers_by_service: Dict[str, List[ComponentDescriptor]],
                          descriptors_by_name: Dict[str, List[ComponentDescriptor]]
                          ) -> List[Tuple[str, ServiceFindingReason]]:
        """Collect the missing services of one descriptor, judged by its first configuration."""
        if not descriptor.configurations:
            return []
        
        # Further instances share the same declared references
        configuration = descriptor.configurations[0]
        
        missing = []
        for reference in descriptor.references:
            if reference.optional or configuration.is_satisfied(reference.name):
                continue
            if reference.interface in providers_by_service:
                continue
            missing.append((reference.interface, classify_missing_service(reference.interface, descriptors_by_name)))
        return missing


def classify_missing_service(service_name: str,
                             descriptors_by_name: Dict[str, List[ComponentDescriptor]]) -> ServiceFindingReason:
    """
    Classify why nothing provides a service.
    
    Args:
        service_name: Referenced service name without any provider
        descriptors_by_name: Component descriptors grouped by their own name
        
    Returns:
        NO_DEFINITION_FOUND if no component carries the name,
        MISSING_REQUIRED_CONFIGURATION if it needs configuration that is absent,
        NO_ACTIVE_INSTANCE otherwise
    """
    definitions = descriptors_by_name.get(service_name)
    if not definitions:
        return ServiceFindingReason.NO_DEFINITION_FOUND
    if definitions[0].requires_configuration:
        return ServiceFindingReason.MISSING_REQUIRED_CONFIGURATION
    return ServiceFindingReason.NO_ACTIVE_INSTANCE


def diagnose_services(descriptors: List[ComponentDescriptor]) -> List[ServiceFinding]:
    """
    Diagnose missing services across all component descriptors.
    
    Args:
        descriptors: All component descriptors of one snapshot
        
    Returns:
        Findings ranked by number of blocked components, descending
    """
    return ComponentServiceDiagnoser().diagnose(descriptors)
