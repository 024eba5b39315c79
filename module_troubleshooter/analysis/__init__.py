"""
Analysis Module

Contains the diagnostic inference engine: inactivity classification, module
requirement diagnosis, component service diagnosis and ranking.
"""

from .base import ModuleDiagnoser, ServiceDiagnoser
from .engine import TroubleshootEngine, component_statistics, module_statistics
from .inactivity import is_inactive, problematic_modules, state_hint, status_text
from .module_diagnoser import ModuleRequirementDiagnoser, classify_mismatch, diagnose_module
from .ranking import aggregate_service_findings, rank_blocking_modules, rank_service_findings
from .service_diagnoser import ComponentServiceDiagnoser, classify_missing_service, diagnose_services

__all__ = [
    # Base classes
    'ModuleDiagnoser',
    'ServiceDiagnoser',
    
    # Diagnosers
    'ModuleRequirementDiagnoser',
    'ComponentServiceDiagnoser',
    'TroubleshootEngine',
    
    # Query functions
    'diagnose_module',
    'diagnose_services',
    'classify_mismatch',
    'classify_missing_service',
    'is_inactive',
    'problematic_modules',
    'status_text',
    'state_hint',
    
    # Ranking and statistics
    'aggregate_service_findings',
    'rank_service_findings',
    'rank_blocking_modules',
    'module_statistics',
    'component_statistics',
]
