"""Configuration loading for autoupdate."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_ENDPOINT = "https://api.gemnasium.com/v1"
DEFAULT_PROJECT_BRANCH = "master"


@dataclass
class Config:
    """Settings read from the YAML configuration file."""

    api_endpoint: str = DEFAULT_API_ENDPOINT
    api_key: str = ""
    project_slug: str = ""
    project_branch: str = DEFAULT_PROJECT_BRANCH
    ignored_paths: list[str] = field(default_factory=list)
    raw_format: bool = False


# key -> expected type; anything else in the document is ignored
_FIELDS = {
    "api_endpoint": str,
    "api_key": str,
    "project_slug": str,
    "project_branch": str,
    "ignored_paths": list,
    "raw_format": bool,
}


def new_config(config_data: bytes | str) -> Config:
    """Build a Config from YAML text, starting from defaults.

    Args:
        config_data: Raw YAML document

    Returns:
        Config with recognized keys overriding defaults

    Raises:
        ConfigError: If the document is not valid YAML or a value has the wrong type
    """
    try:
        data = yaml.safe_load(config_data)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    config = Config()
    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    for key, kind in _FIELDS.items():
        if key not in data or data[key] is None:
            continue
        value = data[key]
        if not isinstance(value, kind):
            raise ConfigError(f"Configuration key '{key}' must be of type {kind.__name__}")
        if key == "ignored_paths" and not all(isinstance(p, str) for p in value):
            raise ConfigError("Configuration key 'ignored_paths' must be a list of strings")
        setattr(config, key, value)

    unknown = sorted(str(key) for key in data if key not in _FIELDS)
    if unknown:
        logger.debug("Ignoring unknown configuration keys: %s", ", ".join(unknown))

    return config


def load_config_file(filepath: str | Path) -> Config:
    """Load configuration from a YAML file.

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    try:
        config_data = Path(filepath).read_bytes()
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {filepath}: {e}") from e
    return new_config(config_data)
