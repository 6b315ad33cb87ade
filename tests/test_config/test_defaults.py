"""Tests for default configuration generation."""

from pathlib import Path

import pytest
import yaml

from autorelease.config.defaults import (
    detect_profile,
    generate_default_config,
    write_default_config,
)
from autorelease.config.loader import load_settings


class TestDetectProfile:
    """Tests for detect_profile."""

    def test_python_project(self, project_dir: Path) -> None:
        (project_dir / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        assert detect_profile(project_dir) == ("python -m pytest", "python -m build", ["dist/*"])

    def test_node_project(self, project_dir: Path) -> None:
        (project_dir / "package.json").write_text("{}")
        test_cmd, build_cmd, _ = detect_profile(project_dir)
        assert test_cmd == "npm test"
        assert build_cmd == "npm run build"

    def test_unknown_project(self, project_dir: Path) -> None:
        assert detect_profile(project_dir) == (None, None, [])


class TestWriteDefaultConfig:
    """Tests for write_default_config."""

    def test_written_file_is_loadable(
        self, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (project_dir / "Cargo.toml").write_text("[package]\nname = 'x'\n")
        output = project_dir / "autorelease.yml"

        write_default_config(output, project_root=project_dir)

        text = output.read_text()
        assert text.startswith("# ====")
        assert yaml.safe_load(text) == generate_default_config(project_dir)

        monkeypatch.setenv("INPUT_GITHUB_TOKEN", "t")
        settings = load_settings(project_root=project_dir)
        assert settings.build_command == "cargo build --release"
        assert settings.asset_patterns == ["target/release/*"]

    def test_creates_parent_directories(self, project_dir: Path) -> None:
        output = project_dir / "config" / "autorelease.yml"
        write_default_config(output, project_root=project_dir)
        assert output.is_file()
