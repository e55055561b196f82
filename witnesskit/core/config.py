# witnesskit/core/config.py
"""
Centralized configuration loading for witnesskit.

Usage:
    from witnesskit.core.config import load_yaml, load_settings, ConfigError

    # Load raw YAML
    data = load_yaml("witnesskit.yaml")

    # Load generator settings (defaults when no path is given)
    settings = load_settings("witnesskit.yaml")

Settings file format:
    generator:
      subject_label: A
      transform_label: B
      witness_suffix: Witness
      default_options: [utilities]
      emit_header: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Errors
# =============================================================================


class ConfigError(Exception):
    """Base error for configuration issues."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when config doesn't match schema."""

    pass


# =============================================================================
# Settings Schema
# =============================================================================


class GeneratorSettings(BaseModel):
    """Naming and default behavior of the witness generator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    subject_label: str = Field(default="A", description="Generic parameter for the subject type")
    transform_label: str = Field(default="B", description="Generic parameter of transformed witnesses")
    witness_suffix: str = Field(default="Witness", description="Appended to interface names")
    default_options: List[str] = Field(
        default_factory=list, description="Options applied to every interface"
    )
    emit_header: bool = Field(default=True, description="Write a generated-file header")

    @field_validator("subject_label", "transform_label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError("generic labels must be identifiers")
        if v == "Self":
            raise ValueError("'Self' is reserved for the interface's own type")
        return v

    @field_validator("witness_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if v and not v.isidentifier():
            raise ValueError("witness_suffix must be usable inside an identifier")
        return v

    @field_validator("transform_label")
    @classmethod
    def validate_distinct(cls, v: str, info) -> str:
        if info.data.get("subject_label") == v:
            raise ValueError("transform_label must differ from subject_label")
        return v


DEFAULT_SETTINGS = GeneratorSettings()


# =============================================================================
# Core Loading Functions
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML file into a mapping.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigParseError: If YAML is invalid or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise ConfigNotFoundError("Config file not found", path=path)

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"Config must be a mapping, got {type(data).__name__}", path=path
        )
    return data


def format_validation_errors(errors: List[dict]) -> str:
    """Render pydantic errors as ``loc -> msg`` lines."""
    lines = []
    for err in errors:
        loc = " -> ".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "Unknown error")
        lines.append(f"  - {loc}: {msg}")
    return "\n".join(lines)


def load_settings(path: Optional[Union[str, Path]] = None) -> GeneratorSettings:
    """
    Load generator settings.

    Reads the ``generator`` section of the file; a missing path returns the
    defaults.
    """
    if path is None:
        return DEFAULT_SETTINGS

    data = load_yaml(path)
    section = data.get("generator", {})
    if not isinstance(section, dict):
        raise ConfigValidationError("'generator' section must be a mapping", path=Path(path))

    try:
        settings = GeneratorSettings(**section)
    except ValidationError as e:
        raise ConfigValidationError(
            "Invalid generator settings:\n" + format_validation_errors(e.errors()),
            path=Path(path),
        ) from e

    logger.debug(f"Loaded generator settings from {path}")
    return settings
