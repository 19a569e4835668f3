"""
Configuration management for cmmcready.

This module handles loading, validating, and saving configuration settings.
"""

from cmmcready.config.settings import (
    ConfigurationError,
    PortfolioSettings,
    RecommendationSettings,
    ReportingSettings,
    ScoringSettings,
    Settings,
    get_config_path,
    load_config,
    save_config,
)

__all__ = [
    # Settings
    "Settings",
    "ScoringSettings",
    "RecommendationSettings",
    "PortfolioSettings",
    "ReportingSettings",
    "load_config",
    "save_config",
    "get_config_path",
    "ConfigurationError",
]
