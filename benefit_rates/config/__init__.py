"""
Configuration module for the rate updater.

Provides:
- YAML settings loading
- Environment variable substitution
"""

from .loader import ConfigLoader, UpdaterSettings, load_settings, substitute_env_vars

__all__ = ["ConfigLoader", "UpdaterSettings", "load_settings", "substitute_env_vars"]
