"""Minimal glob expansion for release asset patterns.

Supported wildcards:
- `*`  matches any characters except `/` (one directory level)
- `**` matches any characters including `/` (any number of levels);
  `**/` also matches zero levels, so `a/**/z.txt` matches `a/z.txt`

Everything else (`?`, `[...]`, `{a,b}`) is matched literally. Patterns are
always matched against the full POSIX path relative to the search root.
"""

import os
import re
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path

# Order matters: "**/" and "**" must win over "*"
_WILDCARD_PATTERN = re.compile(r"\*\*/|\*\*|\*")

_WILDCARD_REGEX = {
    "**/": "(?:.*/)?",
    "**": ".*",
    "*": "[^/]*",
}


def glob_to_regex(pattern: str) -> str:
    """Translate a glob pattern into regular expression source.

    Args:
        pattern: Glob pattern, with either slash convention

    Returns:
        Regex source, meant to be used with fullmatch

    Examples:
        >>> glob_to_regex('dist/*.whl')
        'dist/[^/]*\\\\.whl'
    """
    normalized = pattern.replace("\\", "/")
    parts: list[str] = []
    pos = 0
    for match in _WILDCARD_PATTERN.finditer(normalized):
        parts.append(re.escape(normalized[pos : match.start()]))
        parts.append(_WILDCARD_REGEX[match.group()])
        pos = match.end()
    parts.append(re.escape(normalized[pos:]))
    return "".join(parts)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into an anchored matcher.

    Use ``matcher.fullmatch(relative_posix_path)`` to test a path.
    """
    return re.compile(glob_to_regex(pattern), re.DOTALL)


def matches(pattern: str | re.Pattern[str], relative_path: str) -> bool:
    """Check whether a relative POSIX path matches a pattern."""
    matcher = compile_pattern(pattern) if isinstance(pattern, str) else pattern
    return matcher.fullmatch(relative_path) is not None


def expand_glob(pattern: str, base_dir: Path | str | None = None) -> Iterator[Path]:
    """Yield every path under base_dir whose relative path matches pattern.

    The walk uses an explicit stack instead of recursion. Directories are
    descended into without following symlinks. Both files and directories
    are yielded; sibling order is unspecified.

    Args:
        pattern: Glob pattern relative to base_dir
        base_dir: Search root (defaults to the current working directory)

    Yields:
        Absolute paths of matching entries

    Raises:
        OSError: If a directory cannot be read
    """
    root = Path(base_dir) if base_dir is not None else Path.cwd()
    root = root.absolute()
    matcher = compile_pattern(pattern)
    stack: list[Path] = [root]

    while stack:
        directory = stack.pop()
        with os.scandir(directory) as it:
            entries = list(it)
        for entry in entries:
            full = directory / entry.name
            if entry.is_dir(follow_symlinks=False):
                stack.append(full)
            relative = full.relative_to(root).as_posix()
            if matcher.fullmatch(relative):
                yield full


def is_regular_file(path: Path | str) -> bool:
    """Return True when path exists and is a regular file.

    Missing or inaccessible paths are reported as False, never raised.
    """
    try:
        return stat.S_ISREG(os.stat(path).st_mode)
    except OSError:
        return False


def resolve_asset_paths(
    patterns: Iterable[str],
    base_dir: Path | str | None = None,
) -> list[Path]:
    """Expand asset patterns into the regular files they select.

    Patterns are expanded in order; a file selected by several patterns
    is listed once, at its first position.

    Raises:
        OSError: If a directory under base_dir cannot be read
    """
    seen: set[Path] = set()
    result: list[Path] = []
    for pattern in patterns:
        for path in expand_glob(pattern, base_dir):
            if path in seen or not is_regular_file(path):
                continue
            seen.add(path)
            result.append(path)
    return result


__all__ = [
    "glob_to_regex",
    "compile_pattern",
    "matches",
    "expand_glob",
    "is_regular_file",
    "resolve_asset_paths",
]
