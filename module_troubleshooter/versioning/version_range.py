"""
Version and version range logic for module requirements.

Versions are ``major[.minor[.micro[.qualifier]]]``. Ranges are either a single
version, meaning "at least this version", or a bracketed interval such as
``[1.0,2.0)`` with independently open or closed bounds.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from ..exceptions import InvalidVersion, MalformedVersionRange

VERSION_PATTERN = re.compile(
    r'^(?P<major>\d+)(?:\.(?P<minor>\d+)(?:\.(?P<micro>\d+)(?:\.(?P<qualifier>[0-9A-Za-z_-]+))?)?)?$'
)

INTERVAL_PATTERN = re.compile(
    r'^(?P<left_type>[\[(])\s*(?P<left>[^,\s]+)\s*,\s*(?P<right>[^,\s]+)\s*(?P<right_type>[\])])$'
)


@dataclass(frozen=True, order=True)
class Version:
    """Comparable version; ordering is the numeric triple, then the qualifier string."""
    major: int = 0
    minor: int = 0
    micro: int = 0
    qualifier: str = ""

    @classmethod
    def parse(cls, text: Optional[str]) -> "Version":
        """
        Parse a version string.

        Args:
            text: Version string, e.g. "1", "1.2", "1.2.3" or "1.2.3.SNAPSHOT".
                  Empty or None yields 0.0.0.

        Returns:
            Parsed Version

        Raises:
            InvalidVersion: If the text is not a valid version
        """
        if text is None:
            return cls()

        cleaned = str(text).strip().strip('"')
        if not cleaned:
            return cls()

        match = VERSION_PATTERN.match(cleaned)
        if not match:
            raise InvalidVersion("expected major[.minor[.micro[.qualifier]]]", str(text))

        groups = match.groupdict()
        return cls(
            major=int(groups['major']),
            minor=int(groups['minor'] or 0),
            micro=int(groups['micro'] or 0),
            qualifier=groups['qualifier'] or ""
        )

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.micro}"
        if self.qualifier:
            return f"{base}.{self.qualifier}"
        return base


VersionLike = Union[Version, str]


def _as_version(version: VersionLike) -> Version:
    if isinstance(version, Version):
        return version
    return Version.parse(version)


@dataclass(frozen=True)
class VersionRange:
    """
    Interval over versions.

    A missing left or right bound is unconstrained on that side. Parsed ranges
    always carry a left bound; a bare version has no right bound.
    """
    left: Optional[Version] = None
    left_closed: bool = True
    right: Optional[Version] = None
    right_closed: bool = False

    @classmethod
    def parse(cls, text: Optional[str]) -> "VersionRange":
        """
        Parse a version range.

        Args:
            text: Range text, e.g. "1.0", "[1.0,2.0)" or '"(1.0,1.5]"'

        Returns:
            Parsed VersionRange

        Raises:
            MalformedVersionRange: If the text is neither a single version nor
                a bracketed interval, or if the left bound exceeds the right bound
        """
        if text is None:
            raise MalformedVersionRange("range text is missing")

        cleaned = str(text).strip().strip('"').strip()
        if not cleaned:
            raise MalformedVersionRange("range text is empty", str(text))

        if cleaned[0] in '[(':
            match = INTERVAL_PATTERN.match(cleaned)
            if not match:
                raise MalformedVersionRange("expected [left,right], (left,right) or a mix", str(text))
            try:
                left = Version.parse(match.group('left'))
                right = Version.parse(match.group('right'))
            except InvalidVersion as e:
                raise MalformedVersionRange(str(e), str(text)) from e

            if left > right:
                raise MalformedVersionRange(f"left bound {left} is greater than right bound {right}", str(text))

            return cls(
                left=left,
                left_closed=match.group('left_type') == '[',
                right=right,
                right_closed=match.group('right_type') == ']'
            )

        try:
            floor = Version.parse(cleaned)
        except InvalidVersion as e:
            raise MalformedVersionRange(str(e), str(text)) from e
        return cls(left=floor, left_closed=True, right=None, right_closed=False)

    def is_below(self, version: VersionLike) -> bool:
        """Check whether the version falls short of the left bound."""
        if self.left is None:
            return False
        v = _as_version(version)
        if self.left_closed:
            return v < self.left
        return v <= self.left

    def is_above(self, version: VersionLike) -> bool:
        """Check whether the version exceeds the right bound."""
        if self.right is None:
            return False
        v = _as_version(version)
        if self.right_closed:
            return v > self.right
        return v >= self.right

    def includes(self, version: VersionLike) -> bool:
        """
        Check whether a version lies inside this range.

        Args:
            version: Version or version string to check

        Returns:
            True if the version satisfies both bounds
        """
        v = _as_version(version)
        return not self.is_below(v) and not self.is_above(v)

    @property
    def is_empty(self) -> bool:
        """A range like [1.0,1.0) that no version can satisfy."""
        if self.left is None or self.right is None:
            return False
        return self.left == self.right and not (self.left_closed and self.right_closed)

    def __str__(self) -> str:
        if self.right is None:
            return str(self.left) if self.left is not None else "0.0.0"
        left_type = '[' if self.left_closed else '('
        right_type = ']' if self.right_closed else ')'
        left = self.left if self.left is not None else Version()
        return f"{left_type}{left},{self.right}{right_type}"
