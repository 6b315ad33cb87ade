"""Settings loading.

Combines an optional YAML or TOML config file with the action inputs from
the environment:
- Automatic format detection by file extension
- Error reporting with file location
- Environment values override file values
"""

import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from autorelease.config.models import ActionSettings, RepositoryContext
from autorelease.exceptions import ConfigurationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

SEARCH_PATHS = [
    "autorelease.yml",
    "autorelease.yaml",
    ".autorelease.yml",
    ".autorelease.yaml",
    "autorelease.toml",
]


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file.

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Create the file or use 'autorelease init-config' to generate one",
        ) from None
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path}",
            details=str(e),
            fix_hint="Check YAML syntax at the indicated line",
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in {path}",
            details=f"Expected a mapping at the top level, got {type(data).__name__}",
        )
    return data


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML configuration file.

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            data: dict[str, Any] = tomllib.load(f)
            return data
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Create the file or use 'autorelease init-config' to generate one",
        ) from None
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}",
            details=str(e),
            fix_hint="Check TOML syntax at the indicated line",
        ) from e


def normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Accept input names in any case and with dashes (ALLOWED_BRANCH, allowed-branch)."""
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).strip().lower().replace("-", "_")
        if isinstance(value, list) and name == "asset_patterns":
            value = [str(v) for v in value]
        normalized[name] = value
    return normalized


def find_config_file(project_root: Path) -> Path | None:
    """Return the first config file found in the standard locations."""
    for search_path in SEARCH_PATHS:
        candidate = project_root / search_path
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a config file, choosing the parser from its extension."""
    if path.suffix in (".yml", ".yaml"):
        return normalize_keys(load_yaml(path))
    if path.suffix == ".toml":
        data = load_toml(path)
        # pyproject-style files keep their settings under [tool.autorelease]
        section = data.get("tool", {}).get("autorelease", data)
        return normalize_keys(section)
    raise ConfigurationError(
        f"Unsupported config format: {path.suffix}",
        fix_hint="Use .yml, .yaml, or .toml extension",
    )


def load_settings(
    path: Path | None = None,
    project_root: Path | None = None,
) -> ActionSettings:
    """Build the settings for a run.

    When path is None the standard locations under project_root are
    searched; having no config file at all is fine.

    Raises:
        ConfigurationError: If the file is invalid or required inputs are missing
    """
    if project_root is None:
        project_root = Path.cwd()

    data: dict[str, Any] = {}
    config_path: Path | None
    if path is not None:
        config_path = path if path.is_absolute() else project_root / path
        data = read_config_file(config_path)
    else:
        config_path = find_config_file(project_root)
        if config_path is not None:
            data = read_config_file(config_path)

    source = str(config_path) if config_path else "action inputs"
    try:
        return ActionSettings(**data)
    except PydanticValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors() if err["type"] == "missing"]
        if missing:
            raise ConfigurationError(
                f"Missing required input(s): {', '.join(missing)}",
                details=str(e),
                fix_hint="Pass GITHUB_TOKEN as an action input or environment variable",
            ) from e
        raise ConfigurationError(
            f"Invalid configuration in {source}",
            details=str(e),
            fix_hint="Check the configuration values match expected types",
        ) from e


def load_repository_context() -> RepositoryContext:
    """Read the GITHUB_* runner variables.

    Raises:
        ConfigurationError: If a variable has an invalid value
    """
    try:
        return RepositoryContext()
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid GitHub runner environment",
            details=str(e),
        ) from e
