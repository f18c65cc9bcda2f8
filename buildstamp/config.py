"""
Configuration loading for the build stamping tool.

Settings come from an optional YAML file merged over built-in defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .core.errors import ConfigError
from .core.models import DEFAULT_ATTRIBUTE, DEFAULT_REVISION_LENGTH, DEFAULT_SNAPSHOT_SUFFIX


DEFAULT_CONFIG_FILE = "buildstamp.yaml"


class StampConfig(BaseModel):
    """Stamping settings."""
    project_version: Optional[str] = Field(None, description="Project version to stamp")
    snapshot_suffix: str = Field(DEFAULT_SNAPSHOT_SUFFIX, description="Pre-release marker")
    revision_length: int = Field(DEFAULT_REVISION_LENGTH, gt=0, description="Short revision length")
    build_number_env: str = Field("BUILD_NUMBER", description="Environment variable holding the build number")
    attribute: str = Field(DEFAULT_ATTRIBUTE, description="Manifest attribute to set")
    artifacts: List[str] = Field(default_factory=lambda: ["build/libs/*.jar"],
                                 description="Glob patterns of archives to stamp")
    root: Path = Field(default_factory=Path.cwd, description="Project root and git working tree")

    @field_validator('snapshot_suffix', 'build_number_env', 'attribute')
    @classmethod
    def validate_not_empty(cls, v):
        """Ensure required string settings are set."""
        if not v:
            raise ValueError("Setting must not be empty")
        return v

    @field_validator('artifacts')
    @classmethod
    def validate_relative_patterns(cls, v):
        """Artifact patterns are matched below the project root."""
        for pattern in v:
            if not pattern or Path(pattern).is_absolute():
                raise ValueError(f"Artifact pattern must be relative to root: {pattern!r}")
        return v


def load_config(config_path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None) -> StampConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: YAML file to read; ``buildstamp.yaml`` in the working
            directory is used when present and no path is given
        overrides: Values taking precedence over the file (None values ignored)

    Returns:
        StampConfig: Validated configuration

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or holds invalid values
    """
    settings: Dict[str, Any] = {}

    if config_path is None and Path(DEFAULT_CONFIG_FILE).exists():
        config_path = DEFAULT_CONFIG_FILE

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, 'r') as f:
                    user_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to read config {path}: {e}") from e

            if not isinstance(user_config, dict):
                raise ConfigError(f"Config {path} must contain a mapping")

            settings.update(user_config)
            root = user_config.get("root")
            if root is None:
                # An empty root means the directory holding the config file
                settings["root"] = path.resolve().parent
            elif not isinstance(root, str):
                raise ConfigError(f"Config {path}: root must be a path, got {root!r}")
            elif not Path(root).is_absolute():
                settings["root"] = path.parent / root
            logging.debug(f"Loaded config from {path}")
        else:
            logging.warning(f"Config file {path} not found, using defaults")

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    try:
        return StampConfig(**settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
