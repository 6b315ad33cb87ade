"""Semantic version parsing and bumping.

Release tags are plain MAJOR.MINOR.PATCH strings, optionally carrying a
non-numeric prefix such as 'v'. The first release of a repository has no
previous tag; bumps are then applied to an implicit 0.0.0.
"""

import re
from typing import Literal, get_args

from autorelease.exceptions import ConfigurationError, VersionError

BumpType = Literal["major", "minor", "patch"]
VersionTuple = tuple[int, int, int]

BUMP_TYPES: tuple[str, ...] = get_args(BumpType)

# MAJOR.MINOR.PATCH with an optional non-numeric prefix (v, release-, ...)
SEMVER_PATTERN = re.compile(r"^(?P<prefix>[^\d]*)(\d+)\.(\d+)\.(\d+)$")

INITIAL_VERSION: VersionTuple = (0, 0, 0)


def parse_version(version_str: str) -> VersionTuple:
    """Parse a version or tag string into a tuple of integers.

    Args:
        version_str: Version string to parse (e.g., '1.2.3', 'v1.2.3')

    Returns:
        Tuple of (major, minor, patch)

    Raises:
        VersionError: If the string is not a semantic version

    Examples:
        >>> parse_version('v1.2.3')
        (1, 2, 3)
    """
    if not version_str or not version_str.strip():
        raise VersionError(
            "Empty version string",
            details="The previous release tag is empty",
        )

    match = SEMVER_PATTERN.match(version_str.strip())
    if not match:
        raise VersionError(
            f"Invalid version format: '{version_str}'",
            details="Release tags must follow semantic versioning: MAJOR.MINOR.PATCH",
            fix_hint="Tag releases like '1.2.3' or 'v1.2.3'",
        )

    return (int(match.group(2)), int(match.group(3)), int(match.group(4)))


def is_valid_version(version_str: str) -> bool:
    """Check whether a version or tag string parses.

    Examples:
        >>> is_valid_version('v1.2.3')
        True
        >>> is_valid_version('1.2')
        False
    """
    if not version_str or not version_str.strip():
        return False
    return SEMVER_PATTERN.match(version_str.strip()) is not None


def increment(version: VersionTuple, bump_type: BumpType) -> VersionTuple:
    """Apply a semver increment to a version tuple."""
    major, minor, patch = version
    if bump_type == "major":
        return (major + 1, 0, 0)
    if bump_type == "minor":
        return (major, minor + 1, 0)
    return (major, minor, patch + 1)


def bump_version(last_tag: str | None, bump_type: BumpType | str | None) -> str:
    """Compute the next release version.

    Args:
        last_tag: Tag of the last published release, or None for the first release
        bump_type: 'major', 'minor' or 'patch'

    Returns:
        New version string without prefix (e.g., '1.2.4')

    Raises:
        ConfigurationError: If bump_type is missing or unknown
        VersionError: If last_tag is not a semantic version

    Examples:
        >>> bump_version(None, 'minor')
        '0.1.0'
        >>> bump_version('1.2.3', 'major')
        '2.0.0'
        >>> bump_version('v1.2.3', 'patch')
        '1.2.4'
    """
    if not bump_type:
        raise ConfigurationError(
            "No release type supplied",
            details="A version bump needs one of: major, minor, patch",
        )
    if bump_type not in BUMP_TYPES:
        raise ConfigurationError(
            f"Unknown release type: '{bump_type}'",
            fix_hint="Use one of: major, minor, patch",
        )

    current = parse_version(last_tag) if last_tag else INITIAL_VERSION
    major, minor, patch = increment(current, bump_type)  # type: ignore[arg-type]
    return f"{major}.{minor}.{patch}"


def add_tag_prefix(version: str, prefix: str = "") -> str:
    """Build a tag name from a bare version.

    Examples:
        >>> add_tag_prefix('1.2.3', 'v')
        'v1.2.3'
    """
    return f"{prefix}{version}"


__all__ = [
    "parse_version",
    "is_valid_version",
    "increment",
    "bump_version",
    "add_tag_prefix",
    "BumpType",
    "VersionTuple",
    "BUMP_TYPES",
    "SEMVER_PATTERN",
]
