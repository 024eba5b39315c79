"""
Inactivity classification of modules.
"""

from typing import Iterable, List, Optional

from ..models import Module, ModuleState

STATUS_TEXT = {
    ModuleState.UNINSTALLED: "Uninstalled",
    ModuleState.INSTALLED: "Installed",
    ModuleState.RESOLVED: "Resolved",
    ModuleState.STARTING: "Starting",
    ModuleState.ACTIVE: "Active",
    ModuleState.STOPPING: "Stopping",
}


def is_inactive(module: Module) -> bool:
    """
    Check whether a module has not reached its terminal success state.
    
    Fragments never start, so for them Resolved is success; every other
    module must be Active.
    
    Args:
        module: Module to check
        
    Returns:
        True if the module is worth diagnosing
    """
    if module.is_fragment:
        return module.state != ModuleState.RESOLVED
    return module.state != ModuleState.ACTIVE


def problematic_modules(modules: Iterable[Module]) -> List[Module]:
    """Return the inactive modules, in inventory order."""
    return [module for module in modules if is_inactive(module)]


def status_text(module: Module) -> str:
    """Human readable lifecycle state; a resolved fragment shows as "Fragment"."""
    if module.state == ModuleState.RESOLVED and module.is_fragment:
        return "Fragment"
    return STATUS_TEXT.get(module.state, f"Unknown: {module.state}")


def state_hint(module: Module) -> Optional[str]:
    """Hint for modules stuck in a transitional state."""
    if module.state == ModuleState.STARTING:
        return "If the module is starting forever, there might be a deadlock. Check the thread dumps."
    if module.state == ModuleState.STOPPING:
        return "If the module is stopping forever, there might be a deadlock. Check the thread dumps."
    return None
