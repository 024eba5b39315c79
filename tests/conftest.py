"""
Pytest config and shared fixtures.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest


def _ensure_paths_on_syspath() -> None:
    tests_dir = Path(__file__).resolve().parent
    for path in (tests_dir.parent, tests_dir):
        path_str = str(path)
        if path_str not in sys.path:
            sys.path.insert(0, path_str)


_ensure_paths_on_syspath()

from builders import make_module  # noqa: E402
from module_troubleshooter.models import Capability, Module, ModuleState, Requirement  # noqa: E402


@pytest.fixture
def chain_modules() -> List[Module]:
    """api (installed, missing import) <- impl (installed) <- app (installed), plus an active util module."""
    api = make_module(1, "com.example.api", ModuleState.INSTALLED,
                      imports=[Requirement("org.missing", "[1.0,2.0)")],
                      exports=[Capability("com.example.api", "1.5.0")])
    impl = make_module(2, "com.example.impl", ModuleState.INSTALLED,
                       imports=[Requirement("com.example.api", "[1.0,2.0)")],
                       exports=[Capability("com.example.impl", "1.0.0")])
    app = make_module(3, "com.example.app", ModuleState.INSTALLED,
                      imports=[Requirement("com.example.api", "1.0"), Requirement("com.example.util", None)])
    util = make_module(4, "com.example.util", ModuleState.ACTIVE,
                       exports=[Capability("com.example.util", "3.0.0")])
    return [api, impl, app, util]
