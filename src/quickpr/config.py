"""Configuration management for quickpr."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from quickpr.exceptions import ConfigError

QPR_DIR = ".qpr"
CONFIG_FILE = "config.json"


class GitConfig(BaseModel):
    """git invocation settings."""

    remote: str = "origin"
    timeout: int = 30  # seconds, for captured (non-interactive) commands


class PRConfig(BaseModel):
    """Pull request defaults."""

    base: str | None = None  # None = auto-detect the default branch
    draft: bool = False
    copilot: bool = True
    max_files_listed: int = 10


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    git: GitConfig = Field(default_factory=GitConfig)
    pr: PRConfig = Field(default_factory=PRConfig)
    step_summary: bool = True


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .qpr directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / QPR_DIR).is_dir():
            return current
        current = current.parent
    if (current / QPR_DIR).is_dir():
        return current
    return None


def get_qpr_dir(root: Path) -> Path:
    """Get the .qpr directory for a project root."""
    return root / QPR_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .qpr/config.json, or defaults if there is none."""
    config_path = get_qpr_dir(root) / CONFIG_FILE
    if not config_path.exists():
        return ProjectConfig(name=root.name)
    try:
        data = json.loads(config_path.read_text())
        return ProjectConfig(**data)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .qpr/config.json."""
    qpr_dir = get_qpr_dir(root)
    qpr_dir.mkdir(parents=True, exist_ok=True)
    config_path = qpr_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'pr.draft')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from e
