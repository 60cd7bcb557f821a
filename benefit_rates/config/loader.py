"""
YAML settings loader.

Loads updater settings from YAML files with:
- Environment variable substitution
- Default values
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog
import yaml

from benefit_rates.core.content_api import DEFAULT_API_BASE
from benefit_rates.core.validator import ERROR_THRESHOLD_PCT, WARNING_THRESHOLD_PCT

logger = structlog.get_logger(__name__)


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - required, empty and logged if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        value = os.getenv(var_expr)
        if value is None:
            logger.warning("env_var_not_set", var=var_expr)
            return ""
        return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


@dataclass
class UpdaterSettings:
    """Settings for one update run."""
    api_base: str = DEFAULT_API_BASE
    timeout: float = 30.0
    requests_per_second: float = 5.0
    rates_file: str = "data/benefit-rates.json"
    benefits: Optional[list[str]] = None  # None = all registered extractors
    warning_threshold_pct: float = WARNING_THRESHOLD_PCT
    error_threshold_pct: float = ERROR_THRESHOLD_PCT

    @classmethod
    def from_dict(cls, data: dict) -> "UpdaterSettings":
        """
        Build settings from a parsed ``updater`` mapping.

        Raises:
            ValueError: If a value has the wrong type or thresholds are inverted
        """
        defaults = cls()

        benefits = data.get("benefits")
        if isinstance(benefits, str):
            benefits = [b.strip() for b in benefits.split(",") if b.strip()]
        elif benefits is not None and not isinstance(benefits, list):
            raise ValueError("benefits must be a list or comma-separated string")

        try:
            settings = cls(
                api_base=str(data.get("api_base") or defaults.api_base),
                timeout=float(data.get("timeout", defaults.timeout)),
                requests_per_second=float(
                    data.get("requests_per_second", defaults.requests_per_second)
                ),
                rates_file=str(data.get("rates_file") or defaults.rates_file),
                benefits=benefits or None,
                warning_threshold_pct=float(
                    data.get("warning_threshold_pct", defaults.warning_threshold_pct)
                ),
                error_threshold_pct=float(
                    data.get("error_threshold_pct", defaults.error_threshold_pct)
                ),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid settings value: {e}") from e

        if settings.warning_threshold_pct > settings.error_threshold_pct:
            raise ValueError("warning_threshold_pct must not exceed error_threshold_pct")
        return settings


class ConfigLoader:
    """
    Configuration loader for the updater.

    Loads YAML config files from a directory (the package config
    directory by default).
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        content = substitute_env_vars(content)
        config = yaml.safe_load(content)

        return config or {}

    def load_settings(self, filename: str = "settings.yml") -> UpdaterSettings:
        """
        Load updater settings from YAML.

        Args:
            filename: Settings file name

        Returns:
            UpdaterSettings
        """
        config = self.load_file(filename)
        section = config.get("updater", config)
        if not isinstance(section, dict):
            raise ValueError(f"Invalid settings in {filename}: expected a mapping")

        settings = UpdaterSettings.from_dict(section)
        logger.debug(
            "settings_loaded",
            api_base=settings.api_base,
            rates_file=settings.rates_file,
            benefits=settings.benefits or "all",
        )
        return settings


def load_settings(config_path: Optional[str] = None) -> UpdaterSettings:
    """
    Convenience function to load settings.

    Args:
        config_path: Optional path to settings.yml

    Returns:
        UpdaterSettings
    """
    if config_path:
        config_dir = str(Path(config_path).parent)
        filename = Path(config_path).name
        return ConfigLoader(config_dir).load_settings(filename)
    return ConfigLoader().load_settings()
