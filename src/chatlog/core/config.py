# src/chatlog/core/config.py
"""
Configuration schema and loading for the chat log parser.

Uses Pydantic for validation and YAML files plus CHATLOG_* environment
variables for loading. Settings are frozen (immutable) after construction.

Example YAML:
    transform:
      exclude_extraneous: true
      expose_unset: true
    validation:
      forbid_unknown_fields: true
      stop_at_first_error: false
    log_level: DEBUG
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from chatlog.contracts.errors import DEFAULT_VALIDATION_TITLE
from chatlog.core.logging import configure_from_settings

ENV_PREFIX = "CHATLOG_"

# Nested keys in environment variable names: CHATLOG_TRANSFORM__EXPOSE_UNSET
ENV_NESTING = "__"


class TransformOptions(BaseModel):
    """Options for the raw -> typed transform stage.

    Attributes:
        exclude_extraneous: Copy only declared fields. When False, unknown
            raw keys are kept on the instance as extras.
        expose_unset: Keep absent required fields as None attributes. When
            False they are left off the instance. Absent fields are never
            marked as set either way.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    exclude_extraneous: bool = True
    expose_unset: bool = True


class ValidatorOptions(BaseModel):
    """Options for the constraint validation stage.

    Attributes:
        forbid_unknown_fields: Report extras on an instance as violations.
        stop_at_first_error: Report only the first violation found.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    forbid_unknown_fields: bool = True
    stop_at_first_error: bool = False


class ParserSettings(BaseModel):
    """Top-level settings for the parse pipeline."""

    model_config = {"frozen": True, "extra": "forbid"}

    transform: TransformOptions = Field(
        default_factory=TransformOptions,
        description="Transform stage options",
    )
    validation: ValidatorOptions = Field(
        default_factory=ValidatorOptions,
        description="Validation stage options",
    )
    error_title: str = Field(
        default=f"{DEFAULT_VALIDATION_TITLE} in Session",
        min_length=1,
        description="Prefix of ValidationError messages raised for sessions",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool = False


def deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts, with override taking precedence.

    Returns a new dict; neither input is mutated.
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# Field types whose environment values are parsed as YAML scalars.
# Everything else (titles, level names) is taken verbatim.
_SCALAR_TYPES = (bool, int, float)


def _target_annotation(path: list[str]) -> Any:
    """Declared annotation of the ParserSettings field at ``path``, or None."""
    model: type[BaseModel] | None = ParserSettings
    annotation: Any = None
    for key in path:
        if model is None or key not in model.model_fields:
            return None
        annotation = model.model_fields[key].annotation
        model = annotation if isinstance(annotation, type) and issubclass(annotation, BaseModel) else None
    return annotation


def _parse_env_value(path: list[str], raw_value: str) -> Any:
    if raw_value and _target_annotation(path) in _SCALAR_TYPES:
        return yaml.safe_load(raw_value)
    return raw_value


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect CHATLOG_* variables as a nested dict.

    Keys are lowercased and split on ``__``. Values for bool and numeric
    fields are parsed as YAML scalars ("false" -> False); values for any
    other field, or for unknown keys, stay strings so that a title such as
    "Bad log: retry" or "2024" arrives unchanged.
    """
    overrides: dict[str, Any] = {}
    for name, raw_value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        path = name[len(ENV_PREFIX) :].lower().split(ENV_NESTING)
        node = overrides
        for key in path[:-1]:
            node = node.setdefault(key, {})
        node[path[-1]] = _parse_env_value(path, raw_value)
    return overrides


def load_settings(config_path: Path, *, environ: Mapping[str, str] | None = None) -> ParserSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence (highest to lowest):
    1. Environment variables (CHATLOG_*)
    2. Config file
    3. Defaults from the Pydantic schema

    Args:
        config_path: Path to YAML configuration file
        environ: Environment to read overrides from (defaults to os.environ)

    Returns:
        Validated ParserSettings instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is not a YAML mapping
        pydantic.ValidationError: If configuration fails validation
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {config_path} must be a YAML mapping, got {type(loaded).__name__}")

    config = deep_merge(loaded, _env_overrides(os.environ if environ is None else environ))
    return ParserSettings.model_validate(config)


def configure(config_path: Path, *, environ: Mapping[str, str] | None = None) -> ParserSettings:
    """Load settings and apply their logging options.

    The usual startup call for applications:

        settings = configure(Path("chatlog.yaml"))
        session = parse_session(raw, settings)

    Returns:
        The loaded ParserSettings, to pass to the parse entry points.
    """
    settings = load_settings(config_path, environ=environ)
    configure_from_settings(settings)
    return settings
