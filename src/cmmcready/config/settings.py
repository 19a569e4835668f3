"""
Configuration settings management for cmmcready.

This module handles loading, validating, and saving configuration settings
from YAML files with support for environment variable overrides.

Configuration is loaded from ~/.cmmcready/config.yaml by default, with the
path overridable via the CMMCREADY_CONFIG environment variable.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cmmcready.analysis.gap_analyzer import DEFAULT_TOP_GAPS
from cmmcready.framework.cmmc_level1 import CMMC_LEVEL1_ID
from cmmcready.scoring.maturity_calculator import (
    DEFAULT_POINTS_PER_LEVEL,
    MAX_POINTS_PER_LEVEL,
)

# Default configuration directory
DEFAULT_CONFIG_DIR = Path.home() / ".cmmcready"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ScoringSettings:
    """Scoring and gap analysis settings."""

    points_per_level: int = DEFAULT_POINTS_PER_LEVEL
    target_score: int = 75
    critical_below: int = 50
    high_below: int = 65
    top_gaps: int = DEFAULT_TOP_GAPS


@dataclass
class RecommendationSettings:
    """Recommendation heuristic settings."""

    high_effort_above: int = 30
    medium_effort_above: int = 15
    impact_cap: int = 25


@dataclass
class PortfolioSettings:
    """Portfolio statistics settings."""

    low_risk_from: int = 80
    medium_risk_from: int = 60
    high_risk_from: int = 40
    recent_days: int = 7
    completion_window_days: int = 30


@dataclass
class ReportingSettings:
    """Reporting settings."""

    organization: str = ""
    output_dir: str = str(DEFAULT_CONFIG_DIR / "reports")


@dataclass
class Settings:
    """
    Complete cmmcready configuration settings.

    Settings are loaded from a YAML configuration file and can be overridden
    by environment variables prefixed with CMMCREADY_.

    Attributes:
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR).
        data_file: Assessment export read when no --assessments is given.
        default_framework: Framework scored when no --framework is given.
        scoring: Normalization, target and severity breakpoints.
        recommendations: Effort breakpoints and impact cap.
        portfolio: Risk breakpoints and activity windows.
        reporting: Report generation settings.
    """

    log_level: str = "INFO"
    data_file: str = str(DEFAULT_CONFIG_DIR / "assessments.json")
    default_framework: str = CMMC_LEVEL1_ID

    scoring: ScoringSettings = field(default_factory=ScoringSettings)
    recommendations: RecommendationSettings = field(default_factory=RecommendationSettings)
    portfolio: PortfolioSettings = field(default_factory=PortfolioSettings)
    reporting: ReportingSettings = field(default_factory=ReportingSettings)


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


def get_config_path() -> Path:
    """
    Get the configuration file path.

    Returns the path from CMMCREADY_CONFIG environment variable if set,
    otherwise returns the default path (~/.cmmcready/config.yaml).

    Returns:
        Path to the configuration file.
    """
    env_path = os.environ.get("CMMCREADY_CONFIG")
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE


def load_config(config_path: Path | None = None) -> Settings:
    """
    Load configuration from YAML file.

    Reads configuration from the specified path (or default if not provided),
    applies environment variable overrides, and validates the configuration.
    A missing file is not an error; defaults are used.

    Args:
        config_path: Optional path to configuration file. If not provided,
                    uses CMMCREADY_CONFIG environment variable or default path.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If the configuration file cannot be read or
                          contains invalid settings.
    """
    if config_path is None:
        config_path = get_config_path()

    settings = Settings()

    if config_path.exists():
        try:
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError("Config file must contain a mapping")

        settings = _apply_config_data(settings, config_data)

    settings = _apply_environment_overrides(settings)

    _validate_config(settings)

    return settings


def save_config(settings: Settings, config_path: Path | None = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        settings: Settings instance to save.
        config_path: Optional path to configuration file.

    Raises:
        ConfigurationError: If the configuration cannot be written.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_data = _settings_to_dict(settings)

    try:
        with open(config_path, "w") as f:
            yaml.safe_dump(config_data, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigurationError(f"Cannot write config file: {e}") from e


def _to_int(value: Any, name: str) -> int:
    """Convert a config value to int, rejecting booleans and garbage."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _apply_section(target: Any, data: Any, section: str) -> None:
    """Copy the integer fields of one YAML section onto a settings object."""
    if not data:
        return
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping")
    for key, value in data.items():
        if not hasattr(target, key):
            raise ConfigurationError(f"Unknown setting: {section}.{key}")
        setattr(target, key, _to_int(value, f"{section}.{key}"))


def _apply_config_data(settings: Settings, data: dict[str, Any]) -> Settings:
    """Apply configuration data from parsed YAML to settings."""
    general = data.get("cmmcready") or {}

    if "log_level" in general:
        settings.log_level = str(general["log_level"]).upper()
    if "data_file" in general:
        settings.data_file = str(general["data_file"])
    if "default_framework" in general:
        settings.default_framework = str(general["default_framework"])

    _apply_section(settings.scoring, data.get("scoring"), "scoring")
    _apply_section(settings.recommendations, data.get("recommendations"), "recommendations")
    _apply_section(settings.portfolio, data.get("portfolio"), "portfolio")

    reporting = data.get("reporting") or {}
    if "organization" in reporting:
        settings.reporting.organization = str(reporting["organization"] or "")
    if "output_dir" in reporting:
        settings.reporting.output_dir = str(reporting["output_dir"])

    return settings


def _apply_environment_overrides(settings: Settings) -> Settings:
    """Apply environment variable overrides to settings."""
    env_map: dict[str, tuple[str, Callable[[str], Any]]] = {
        "CMMCREADY_LOG_LEVEL": ("log_level", lambda x: x.upper()),
        "CMMCREADY_DATA_FILE": ("data_file", str),
        "CMMCREADY_DEFAULT_FRAMEWORK": ("default_framework", str),
        "CMMCREADY_TARGET_SCORE": (
            "scoring.target_score",
            lambda x: _to_int(x, "CMMCREADY_TARGET_SCORE"),
        ),
    }

    for env_var, (attr_path, converter) in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested_attr(settings, attr_path, converter(value))

    return settings


def _set_nested_attr(obj: Any, path: str, value: Any) -> None:
    """Set a nested attribute on an object using dot notation."""
    parts = path.split(".")
    for part in parts[:-1]:
        obj = getattr(obj, part)
    setattr(obj, parts[-1], value)


def _validate_config(settings: Settings) -> None:
    """
    Validate configuration settings.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    if settings.log_level not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log_level: {settings.log_level}. "
            f"Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if not settings.default_framework:
        raise ConfigurationError("default_framework must not be empty")

    scoring = settings.scoring
    if not 1 <= scoring.points_per_level <= MAX_POINTS_PER_LEVEL:
        raise ConfigurationError(
            f"points_per_level must be between 1 and {MAX_POINTS_PER_LEVEL}"
        )
    if not 0 <= scoring.critical_below <= scoring.high_below <= scoring.target_score <= 100:
        raise ConfigurationError(
            "Scoring breakpoints must satisfy "
            "0 <= critical_below <= high_below <= target_score <= 100"
        )
    if scoring.top_gaps < 0:
        raise ConfigurationError("top_gaps must not be negative")

    recs = settings.recommendations
    if not 0 <= recs.medium_effort_above <= recs.high_effort_above:
        raise ConfigurationError(
            "Effort breakpoints must satisfy 0 <= medium_effort_above <= high_effort_above"
        )
    if recs.impact_cap < 0:
        raise ConfigurationError("impact_cap must not be negative")

    portfolio = settings.portfolio
    if not (
        0 <= portfolio.high_risk_from <= portfolio.medium_risk_from
        <= portfolio.low_risk_from <= 100
    ):
        raise ConfigurationError(
            "Risk breakpoints must satisfy "
            "0 <= high_risk_from <= medium_risk_from <= low_risk_from <= 100"
        )
    if portfolio.recent_days < 0 or portfolio.completion_window_days < 0:
        raise ConfigurationError("Activity windows must not be negative")


def _settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings instance to dictionary for YAML serialization."""
    return {
        "cmmcready": {
            "log_level": settings.log_level,
            "data_file": settings.data_file,
            "default_framework": settings.default_framework,
        },
        "scoring": {
            "points_per_level": settings.scoring.points_per_level,
            "target_score": settings.scoring.target_score,
            "critical_below": settings.scoring.critical_below,
            "high_below": settings.scoring.high_below,
            "top_gaps": settings.scoring.top_gaps,
        },
        "recommendations": {
            "high_effort_above": settings.recommendations.high_effort_above,
            "medium_effort_above": settings.recommendations.medium_effort_above,
            "impact_cap": settings.recommendations.impact_cap,
        },
        "portfolio": {
            "low_risk_from": settings.portfolio.low_risk_from,
            "medium_risk_from": settings.portfolio.medium_risk_from,
            "high_risk_from": settings.portfolio.high_risk_from,
            "recent_days": settings.portfolio.recent_days,
            "completion_window_days": settings.portfolio.completion_window_days,
        },
        "reporting": {
            "organization": settings.reporting.organization,
            "output_dir": settings.reporting.output_dir,
        },
    }
