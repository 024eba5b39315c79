"""
Parser for manifest-style package headers (Import-Package, Export-Package).

A header is a comma separated list of clauses. Each clause holds one or more
package names followed by attributes (``version="[1.0,2.0)"``) and directives
(``resolution:=optional``), all separated by semicolons. Quoted values may
contain commas and semicolons.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..exceptions import SnapshotParseError
from ..models import Capability, Requirement

logger = logging.getLogger(__name__)

VERSION_ATTRIBUTE = "version"
LEGACY_VERSION_ATTRIBUTE = "specification-version"
RESOLUTION_DIRECTIVE = "resolution"
RESOLUTION_OPTIONAL = "optional"


@dataclass
class Clause:
    """One clause of a header."""
    paths: List[str]
    attributes: Dict[str, str] = field(default_factory=dict)
    directives: Dict[str, str] = field(default_factory=dict)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def get_directive(self, name: str) -> Optional[str]:
        return self.directives.get(name)


def _split_outside_quotes(text: str, separator: str) -> List[str]:
    """Split text on a separator that is not inside double quotes."""
    parts = []
    current = []
    in_quotes = False
    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        if char == separator and not in_quotes:
            parts.append(''.join(current))
            current = []
        else:
            current.append(char)
    if in_quotes:
        raise SnapshotParseError(f"Unterminated quote in header: {text}")
    parts.append(''.join(current))
    return parts


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def parse_header(header: Optional[str]) -> List[Clause]:
    """
    Parse a header into clauses.

    Args:
        header: Raw header value, may be None or empty

    Returns:
        List of Clause objects, empty if the header is absent

    Raises:
        SnapshotParseError: If a clause is not well formed
    """
    if header is None or not header.strip():
        return []

    clauses = []
    for raw_clause in _split_outside_quotes(header, ','):
        if not raw_clause.strip():
            continue

        paths = []
        attributes = {}
        directives = {}
        for piece in _split_outside_quotes(raw_clause, ';'):
            piece = piece.strip()
            if not piece:
                continue
            if ':=' in piece:
                key, value = piece.split(':=', 1)
                directives[key.strip()] = _unquote(value)
            elif '=' in piece:
                key, value = piece.split('=', 1)
                attributes[key.strip()] = _unquote(value)
            elif attributes or directives:
                raise SnapshotParseError(f"Package name '{piece}' must precede parameters in clause: {raw_clause.strip()}")
            else:
                paths.append(piece)

        if not paths:
            raise SnapshotParseError(f"Clause without package name: {raw_clause.strip()}")

        clauses.append(Clause(paths=paths, attributes=attributes, directives=directives))

    return clauses


def _clause_version(clause: Clause) -> Optional[str]:
    version = clause.get_attribute(VERSION_ATTRIBUTE)
    if version is None:
        version = clause.get_attribute(LEGACY_VERSION_ATTRIBUTE)
    return version


def requirements_from_header(header: Optional[str]) -> List[Requirement]:
    """
    Build requirements from an Import-Package style header.

    Args:
        header: Raw header value

    Returns:
        One Requirement per package name, in declaration order
    """
    requirements = []
    for clause in parse_header(header):
        optional = clause.get_directive(RESOLUTION_DIRECTIVE) == RESOLUTION_OPTIONAL
        version_range = _clause_version(clause)
        for path in clause.paths:
            requirements.append(Requirement(name=path, version_range=version_range, optional=optional))
    return requirements


def capabilities_from_header(header: Optional[str], provider_id: Optional[int] = None) -> List[Capability]:
    """
    Build capabilities from an Export-Package style header.

    Args:
        header: Raw header value
        provider_id: Id of the exporting module

    Returns:
        One Capability per package name; exports without version default to 0.0.0
    """
    capabilities = []
    for clause in parse_header(header):
        version = _clause_version(clause) or "0.0.0"
        for path in clause.paths:
            capabilities.append(Capability(name=path, version=version, provider_id=provider_id))
    logger.debug(f"Parsed {len(capabilities)} exported capabilities")
    return capabilities
