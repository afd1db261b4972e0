"""Configuration management for lint options and environment variables."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from curriculum_lint.common.constants import (
    CONFIG_FILENAME,
    DEFAULT_CHAPTER_COUNT_MAX,
    DEFAULT_CHAPTER_COUNT_MIN,
    DEFAULT_REQUIRED_SECTIONS,
    DEFAULT_VOICE_MIN_DEVIATIONS,
    DEFAULT_VOICE_THRESHOLD,
)
from curriculum_lint.utils.exceptions import ConfigurationError

TRUTHY_VALUES = {"1", "true", "yes", "on"}
FALSY_VALUES = {"0", "false", "no", "off", ""}


class LintConfig(BaseModel):
    """Recognized lint options.

    Keys are accepted in camelCase (``chapterCountMin``) as well as snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    chapter_count_min: int = Field(DEFAULT_CHAPTER_COUNT_MIN, alias="chapterCountMin", ge=0)
    chapter_count_max: int = Field(DEFAULT_CHAPTER_COUNT_MAX, alias="chapterCountMax", ge=0)
    required_sections: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_SECTIONS), alias="requiredSections"
    )
    strict: bool = False
    disabled_rules: list[str] = Field(default_factory=list, alias="disabledRules")
    voice_threshold: float = Field(DEFAULT_VOICE_THRESHOLD, alias="voiceThreshold", ge=0.0, le=1.0)
    voice_min_deviations: int = Field(
        DEFAULT_VOICE_MIN_DEVIATIONS, alias="voiceMinDeviations", ge=1
    )
    workers: int = Field(1, ge=1)

    @model_validator(mode="after")
    def validate_chapter_bounds(self) -> "LintConfig":
        """Validate that the chapter range is not inverted."""
        if self.chapter_count_min > self.chapter_count_max:
            raise ValueError(
                f"chapterCountMin ({self.chapter_count_min}) must not exceed "
                f"chapterCountMax ({self.chapter_count_max})"
            )
        return self


class Config:
    """Process settings loaded from environment variables."""

    def __init__(self) -> None:
        """Load configuration from .env file and environment."""
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

        self.log_level = os.getenv("CURRICULUM_LINT_LOG_LEVEL", "WARNING")
        self.log_format = os.getenv("CURRICULUM_LINT_LOG_FORMAT", "console")
        self.strict = self._get_bool("CURRICULUM_LINT_STRICT")

    def _get_bool(self, key: str) -> bool | None:
        """Get a boolean environment variable.

        Args:
            key: Environment variable name

        Returns:
            Parsed value, or None if the variable is not set

        Raises:
            ConfigurationError: If the value is not a recognized boolean
        """
        value = os.getenv(key)
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in TRUTHY_VALUES:
            return True
        if normalized in FALSY_VALUES:
            return False
        raise ConfigurationError(f"{key} must be a boolean, got '{value}'")


def read_config_file(config_path: Path) -> dict[str, Any]:
    """Read lint options from a YAML file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Mapping of option names to values (empty for an empty file)

    Raises:
        ConfigurationError: If the file is unreadable or not a mapping
    """
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read config file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return data


def _normalize_keys(values: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases onto field names so later sources replace earlier ones."""
    alias_to_field = {
        info.alias: name for name, info in LintConfig.model_fields.items() if info.alias
    }
    return {alias_to_field.get(key, key): value for key, value in values.items()}


def build_lint_config(
    root: Path | None = None,
    config_path: Path | None = None,
    env: Config | None = None,
    overrides: dict[str, Any] | None = None,
) -> LintConfig:
    """Assemble lint options from every source.

    Precedence, lowest first: defaults, config file, environment, overrides.
    Without an explicit ``config_path`` the file ``.curriculum-lint.yml`` in
    ``root`` is used when present.

    Args:
        root: Curriculum root directory
        config_path: Explicit YAML config file
        env: Environment settings
        overrides: Options given on the command line (None values are ignored)

    Returns:
        Validated LintConfig

    Raises:
        ConfigurationError: If any source holds an invalid value
    """
    values: dict[str, Any] = {}

    if config_path is None and root is not None:
        default_path = root / CONFIG_FILENAME
        if default_path.is_file():
            config_path = default_path

    if config_path is not None:
        values.update(_normalize_keys(read_config_file(config_path)))

    if env is not None and env.strict is not None:
        values["strict"] = env.strict

    for key, value in _normalize_keys(overrides or {}).items():
        if value is not None:
            values[key] = value

    try:
        return LintConfig.model_validate(values)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid lint configuration: {e}") from e
