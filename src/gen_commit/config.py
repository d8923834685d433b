"""Configuration management for gen-commit.

Settings come from three places, later ones winning: built-in defaults, an
optional YAML settings file, and command-line options.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from gen_commit.errors import ConfigurationError
from gen_commit.git import parse_exclusion_list

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "anthropic:claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 500
DEFAULT_CONFIG_PATH = Path.home() / ".gen-commit" / "config.yaml"


class GenerationSettings(BaseModel):
    """Options for one commit message generation run."""

    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = 0.2
    ignore: list[str] = []
    analysis_enabled: bool = True
    dry_run: bool = False
    verbose: bool = False
    recent_commit_count: int = 5
    scopes_file: str = "scopes.txt"
    workspace_marker: str = "nx.json"

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_tokens must be at least 1")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        return v

    @field_validator("recent_commit_count")
    @classmethod
    def validate_recent_commit_count(cls, v: int) -> int:
        if v < 0:
            raise ValueError("recent_commit_count cannot be negative")
        return v

    @field_validator("ignore", mode="before")
    @classmethod
    def split_ignore(cls, v: Any) -> Any:
        """Accept a comma-separated string as well as a list of patterns."""
        if v is None:
            return []
        if isinstance(v, str):
            return parse_exclusion_list(v)
        if isinstance(v, list):
            return [str(item).strip() for item in v if str(item).strip()]
        return v

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return self.model_dump()


def load_settings_file(path: Path) -> dict[str, Any]:
    """Load settings overrides from a YAML file.

    A missing file yields no overrides.

    Args:
        path: Path to the YAML settings file

    Returns:
        Mapping of setting names to values

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid settings file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file root must be a mapping in {path}")

    unknown = sorted(set(data) - set(GenerationSettings.model_fields))
    if unknown:
        logger.warning(f"Ignoring unknown settings in {path}: {', '.join(unknown)}")
        data = {key: value for key, value in data.items() if key not in unknown}

    logger.debug(f"Loaded settings from {path}")
    return data


def build_settings(
    config_path: Path | None = None, **overrides: Any
) -> GenerationSettings:
    """Merge defaults, the settings file and explicit overrides.

    Overrides whose value is None are treated as not given.

    Raises:
        ConfigurationError: If the merged settings are invalid
    """
    values = load_settings_file(config_path or DEFAULT_CONFIG_PATH)
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return GenerationSettings(**values)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid settings: {messages}") from e
