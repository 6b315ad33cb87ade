"""Configuration management for autorelease."""

from autorelease.config.loader import load_repository_context, load_settings
from autorelease.config.models import ActionSettings, RepositoryContext

__all__ = [
    "ActionSettings",
    "RepositoryContext",
    "load_settings",
    "load_repository_context",
]
