"""Utility modules for autorelease."""

from autorelease.utils.fsglob import (
    compile_pattern,
    expand_glob,
    is_regular_file,
    resolve_asset_paths,
)
from autorelease.utils.shell import ShellError, capture, strip_ansi, stream
from autorelease.utils.version import (
    BUMP_TYPES,
    SEMVER_PATTERN,
    BumpType,
    VersionTuple,
    add_tag_prefix,
    bump_version,
    is_valid_version,
    parse_version,
)

__all__ = [
    # Shell utilities
    "capture",
    "stream",
    "strip_ansi",
    "ShellError",
    # Glob utilities
    "compile_pattern",
    "expand_glob",
    "is_regular_file",
    "resolve_asset_paths",
    # Version utilities
    "parse_version",
    "is_valid_version",
    "bump_version",
    "add_tag_prefix",
    "BumpType",
    "VersionTuple",
    "BUMP_TYPES",
    "SEMVER_PATTERN",
]
