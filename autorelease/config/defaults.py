"""Default configuration generation.

Writes a commented autorelease.yml with defaults guessed from the files
present in the project root.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from autorelease.config.models import (
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_OPENAI_MODEL,
)
from autorelease.exceptions import ConfigurationError

# marker file -> (lint/test command, build command, asset patterns)
PROJECT_PROFILES: list[tuple[str, str, str, list[str]]] = [
    ("pyproject.toml", "python -m pytest", "python -m build", ["dist/*"]),
    ("package.json", "npm test", "npm run build", ["dist/**/*.js"]),
    ("Cargo.toml", "cargo test", "cargo build --release", ["target/release/*"]),
    ("go.mod", "go test ./...", "go build ./...", []),
]


def detect_profile(project_root: Path) -> tuple[str | None, str | None, list[str]]:
    """Guess commands and asset patterns from marker files.

    Returns:
        Tuple of (lint/test command, build command, asset patterns)
    """
    for marker, test_cmd, build_cmd, patterns in PROJECT_PROFILES:
        if (project_root / marker).exists():
            return test_cmd, build_cmd, list(patterns)
    return None, None, []


def generate_default_config(project_root: Path) -> dict[str, Any]:
    """Build the default settings mapping for a project."""
    test_cmd, build_cmd, patterns = detect_profile(project_root)
    return {
        "allowed_branch": "main",
        "tag_prefix": "",
        "lint_and_tests_command": test_cmd or "",
        "build_command": build_cmd or "",
        "asset_patterns": patterns,
        "draft_release": False,
        "prerelease": False,
        "openai_api_model": DEFAULT_OPENAI_MODEL,
        "openai_api_base_url": DEFAULT_OPENAI_BASE_URL,
    }


def generate_config_header() -> str:
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    return f"""# ============================================================================
# Release Configuration - autorelease.yml
# ============================================================================
# Auto-generated on {now}
#
# Secrets (GITHUB_TOKEN, OPENAI_API_KEY) and DISCORD_WEBHOOK are read from
# the action inputs only; do not commit them here.
# Action inputs (INPUT_* variables) override every value in this file.
# ============================================================================

"""


def write_default_config(output_path: Path, project_root: Path | None = None) -> None:
    """Generate and write a default configuration file.

    Raises:
        ConfigurationError: If file cannot be written
    """
    if project_root is None:
        project_root = Path.cwd()

    config = generate_default_config(project_root)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(generate_config_header())
            f.write(
                yaml.safe_dump(
                    config,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            )
    except PermissionError:
        raise ConfigurationError(
            f"Permission denied writing config to {output_path}",
            fix_hint="Check file permissions or use a different location",
        ) from None
    except OSError as e:
        raise ConfigurationError(
            f"Failed to write config to {output_path}",
            details=str(e),
            fix_hint="Check disk space and path validity",
        ) from e
