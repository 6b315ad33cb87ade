"""Pydantic v2 settings models for a release run.

Two immutable settings objects are built once at the start of a run:

- ActionSettings: the action inputs, read from INPUT_<NAME> environment
  variables (how GitHub Actions passes `with:` values) and optionally
  from a config file.
- RepositoryContext: the GITHUB_* variables describing the repository,
  the commit being built and the triggering event.

Empty strings are treated as "not set", in the environment and in config
files alike, so that an unset action input never hides a config file
value or a default.
"""

import json
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from autorelease.exceptions import ConfigurationError

DEFAULT_OPENAI_MODEL = "gpt-4"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1/"
DEFAULT_GITHUB_API_URL = "https://api.github.com"


def _drop_empty(data: Any) -> Any:
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if v != "" and v is not None}
    return data


class ActionSettings(BaseSettings):
    """Inputs of a release run.

    Environment variables (INPUT_ prefix) override values loaded from a
    config file.
    """

    github_token: SecretStr = Field(
        validation_alias=AliasChoices("INPUT_GITHUB_TOKEN", "GITHUB_TOKEN", "github_token"),
        description="Token used for the GitHub REST API",
    )
    lint_and_tests_command: str | None = Field(
        default=None,
        description="Command run before building (lint and tests)",
    )
    build_command: str | None = Field(
        default=None,
        description="Command that produces the release artifacts",
    )
    asset_patterns: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Whitespace separated glob patterns of files to upload",
    )
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("INPUT_OPENAI_API_KEY", "openai_api_key"),
        description="Enables the changelog summary when set",
    )
    openai_api_model: str = Field(
        default=DEFAULT_OPENAI_MODEL,
        description="Chat completion model",
    )
    openai_api_base_url: str = Field(
        default=DEFAULT_OPENAI_BASE_URL,
        description="Base URL of an OpenAI compatible API",
    )
    discord_webhook: str | None = Field(
        default=None,
        description="Webhook notified after a successful release",
    )
    allowed_branch: str = Field(
        default="main",
        description="Only branch releases may be made from",
    )
    draft_release: bool = Field(default=False, description="Create release as draft")
    prerelease: bool = Field(default=False, description="Mark release as prerelease")
    tag_prefix: str = Field(
        default="",
        description="Prefix for new tags (e.g., 'v' for v1.0.0)",
    )

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        env_ignore_empty=True,
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        return _drop_empty(data)

    @field_validator("asset_patterns", mode="before")
    @classmethod
    def split_patterns(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.split()
        return v

    @field_validator("draft_release", "prerelease", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        # Only "true" turns a flag on; any other input string leaves it off
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    @field_validator("tag_prefix")
    @classmethod
    def validate_tag_prefix(cls, v: str) -> str:
        if any(ch.isdigit() or ch.isspace() for ch in v):
            raise ValueError("tag_prefix must not contain digits or whitespace")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over config file values passed as init kwargs
        return env_settings, init_settings, file_secret_settings

    @property
    def summary_enabled(self) -> bool:
        return self.openai_api_key is not None


class RepositoryContext(BaseSettings):
    """Repository and event information provided by the Actions runner."""

    repository: str = Field(default="", description="owner/repo")
    sha: str = Field(default="", description="Commit the run was triggered for")
    event_path: Path | None = Field(
        default=None,
        description="JSON payload of the triggering event",
    )
    api_url: str = Field(default=DEFAULT_GITHUB_API_URL, description="REST API root")
    workspace: Path | None = Field(default=None, description="Checkout directory")

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        env_ignore_empty=True,
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        return _drop_empty(data)

    @property
    def owner(self) -> str:
        return self._split_repository()[0]

    @property
    def repo(self) -> str:
        return self._split_repository()[1]

    def _split_repository(self) -> tuple[str, str]:
        owner, _, repo = self.repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigurationError(
                f"Invalid repository: '{self.repository}'",
                details="GITHUB_REPOSITORY must have the form owner/repo",
                fix_hint="Run inside GitHub Actions or export GITHUB_REPOSITORY",
            )
        return owner, repo

    def event_payload(self) -> dict[str, Any]:
        """Load the triggering event payload.

        Returns:
            Parsed payload, or an empty dict when no event file is available

        Raises:
            ConfigurationError: If the event file exists but is not valid JSON
        """
        if self.event_path is None or not self.event_path.is_file():
            return {}
        try:
            data = json.loads(self.event_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read event payload: {self.event_path}",
                details=str(e),
            ) from e
        return data if isinstance(data, dict) else {}

    def commit_message(self) -> str | None:
        """Message of the head commit of a push event, if present."""
        head_commit = self.event_payload().get("head_commit") or {}
        message = head_commit.get("message")
        return message if isinstance(message, str) else None
