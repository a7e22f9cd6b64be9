"""
Configuration loader for sentence-to-logic runs.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import yaml

from sentence_logic.errors import ConfigError
from sentence_logic.parser import DEFAULT_SPACY_MODEL

VALID_PARAMS = (
    "sentences",
    "logical forms",
    "output file",
    "drop errors",
    "parser",
    "unit timeout seconds",
    "format timeout seconds",
    "workers",
    "partition size",
    "max units",
    "preserve order",
    "run log",
)

DEFAULT_OUTPUT_NAME = "logical_forms.tsv"
DEFAULT_UNIT_TIMEOUT_S = 2.0
DEFAULT_FORMAT_TIMEOUT_S = 2.0
DEFAULT_PARTITION_SIZE = 1000
DEFAULT_MAX_UNITS = 64


def default_workers() -> int:
    return min(8, os.cpu_count() or 1)


@dataclass(frozen=True)
class StepConfig:
    """Effective parameters of one sentence-to-logic run."""

    sentences_file: Path
    output_file: Path
    logical_forms: dict[str, Any] = field(default_factory=dict)
    drop_errors: bool = True
    parser_model: str = DEFAULT_SPACY_MODEL
    # Deadline for parse + filter + generate, one unit per record.
    unit_timeout_s: float = DEFAULT_UNIT_TIMEOUT_S
    # Deadline for rendering one output line.
    format_timeout_s: float = DEFAULT_FORMAT_TIMEOUT_S
    workers: int = field(default_factory=default_workers)
    partition_size: int = DEFAULT_PARTITION_SIZE
    max_units: int = DEFAULT_MAX_UNITS
    preserve_order: bool = False
    run_log: Path | None = None

    def as_params(self) -> dict[str, Any]:
        """Config in its file vocabulary, JSON-safe, for the params manifest."""
        return {
            "sentences": str(self.sentences_file),
            "logical forms": self.logical_forms,
            "output file": str(self.output_file),
            "drop errors": self.drop_errors,
            "parser": {"model": self.parser_model},
            "unit timeout seconds": self.unit_timeout_s,
            "format timeout seconds": self.format_timeout_s,
            "workers": self.workers,
            "partition size": self.partition_size,
            "max units": self.max_units,
            "preserve order": self.preserve_order,
            "run log": str(self.run_log) if self.run_log else None,
        }


def load_config(config_path: Path | str) -> dict[str, Any]:
    """
    Load configuration from YAML file with environment variable substitution.

    Args:
        config_path: Path to config file.

    Returns:
        Dictionary with configuration values

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the YAML root is not a mapping
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        config: dict[str, Any] = {}
    elif not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")
    else:
        config = cast(dict[str, Any], data)

    return cast(dict[str, Any], _substitute_env_vars(config))


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute ${VAR} patterns with environment variables."""
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    if isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        var_name = obj[2:-1]
        return os.getenv(var_name, obj)  # fall back to original if unset
    return obj


def _sentences_path(value: Any) -> Path:
    if isinstance(value, Mapping):
        value = value.get("file")
    if not isinstance(value, str) or not value:
        raise ConfigError("'sentences' must be a file path or a mapping with a 'file' key")
    return Path(value)


def _positive(params: Mapping[str, Any], key: str, default: Any, kind: type) -> Any:
    value = params.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive number, got {value!r}")
    if kind is int and not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    return kind(value)


def _flag(params: Mapping[str, Any], key: str, default: bool) -> bool:
    value = params.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def build_step_config(params: Mapping[str, Any]) -> StepConfig:
    """
    Validate a raw config mapping and fill in defaults.

    The output file defaults to ``logical_forms.tsv`` next to the sentences file.
    """
    extras = sorted(set(params) - set(VALID_PARAMS))
    if extras:
        raise ConfigError(f"Unexpected parameters for sentence to logic: {extras}")
    if "sentences" not in params:
        raise ConfigError("Missing required parameter 'sentences'")

    sentences_file = _sentences_path(params["sentences"])

    output = params.get("output file")
    output_file = Path(output) if output else sentences_file.parent / DEFAULT_OUTPUT_NAME

    logical_forms = params.get("logical forms") or {}
    if not isinstance(logical_forms, Mapping):
        raise ConfigError("'logical forms' must be a mapping")

    parser_params = params.get("parser") or {}
    if not isinstance(parser_params, Mapping):
        raise ConfigError("'parser' must be a mapping")

    run_log = params.get("run log")

    return StepConfig(
        sentences_file=sentences_file,
        output_file=output_file,
        logical_forms=dict(logical_forms),
        drop_errors=_flag(params, "drop errors", True),
        parser_model=str(parser_params.get("model", DEFAULT_SPACY_MODEL)),
        unit_timeout_s=_positive(params, "unit timeout seconds", DEFAULT_UNIT_TIMEOUT_S, float),
        format_timeout_s=_positive(params, "format timeout seconds", DEFAULT_FORMAT_TIMEOUT_S, float),
        workers=_positive(params, "workers", default_workers(), int),
        partition_size=_positive(params, "partition size", DEFAULT_PARTITION_SIZE, int),
        max_units=_positive(params, "max units", DEFAULT_MAX_UNITS, int),
        preserve_order=_flag(params, "preserve order", False),
        run_log=Path(run_log) if run_log else None,
    )
