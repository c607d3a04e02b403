"""
Configuration Loader

Loads YAML configuration files for the import pipeline: source mirrors,
HTTP headers and timeouts, pricing policy, listing search defaults
and log verbosity.
Selected values can be overridden from environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

# Environment variable -> (section, key) override map
ENV_OVERRIDES = {
    'ALIEXPRESS_URL': ('source', 'base_url'),
    'ALIEXPRESS_MARKUP_PERCENTAGE': ('pricing', 'markup_percentage'),
    'LOG_LEVEL': ('logging', 'level'),
}


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'importer.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def apply_env_overrides(settings: Dict[str, Any], environ=None) -> Dict[str, Any]:
    """
    Apply environment variable overrides to loaded settings.

    Args:
        settings: Settings dictionary (modified in place)
        environ: Mapping to read variables from (default: os.environ)

    Returns:
        The same settings dictionary
    """
    environ = os.environ if environ is None else environ

    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        if key == 'markup_percentage':
            try:
                value = float(value)
            except ValueError:
                logger.warning("Ignoring non-numeric %s=%r", var, value)
                continue
        settings.setdefault(section, {})[key] = value

    return settings


def load_importer_settings() -> Dict[str, Any]:
    """
    Load import pipeline settings.

    Returns:
        Dictionary with 'source', 'http', 'pricing', 'search' and 'logging'
        sections,
        with environment overrides applied.

    Example:
        {
            'source': {'base_url': 'https://www.aliexpress.com', 'mirrors': [...]},
            'pricing': {'markup_percentage': 30, 'policy': 'plain', ...},
            ...
        }
    """
    settings = load_config('importer.yaml')
    return apply_env_overrides(settings)
