"""
config.py - Configuration management for ghapin

This module handles loading, validating, and managing configuration for the ghapin tool.
"""

import copy
import logging
import os
from typing import Any, Dict, List, Optional, cast

import yaml

from .github import DEFAULT_API_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "github": {
        "api_url": DEFAULT_API_URL,
        "timeout": DEFAULT_TIMEOUT,
    },
    "max_workers": 4,
    "create_backup": False,
    "exclude_actions": [],
    "report": {
        "color_output": True,
    },
}


class ConfigurationError(Exception):
    """Exception raised for configuration errors"""

    pass


def get_config_paths() -> List[str]:
    """
    Get list of possible config file locations in priority order

    Returns:
        List of config file paths to check
    """
    paths = []

    paths.append(os.path.join(os.getcwd(), "ghapin.yml"))
    paths.append(os.path.join(os.getcwd(), "ghapin.yaml"))
    paths.append(os.path.join(os.getcwd(), ".ghapin.yml"))
    paths.append(os.path.join(os.getcwd(), ".ghapin.yaml"))

    home_dir = os.path.expanduser("~")
    paths.append(os.path.join(home_dir, ".config", "ghapin", "config.yml"))
    paths.append(os.path.join(home_dir, ".config", "ghapin", "config.yaml"))

    return paths


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two config dictionaries

    Args:
        base: Base configuration
        override: Configuration to override base

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, override_value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(override_value, dict):
            result[key] = merge_configs(result[key], override_value)
        else:
            result[key] = override_value

    return result


def _validate_positive_int(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"'{name}' must be a positive number")
    if name == "max_workers" and not isinstance(value, int):
        raise ConfigurationError("'max_workers' must be a positive integer")


def _validate_github(config: Dict[str, Any]) -> None:
    """Validate GitHub API configuration"""

    if "github" not in config:
        return

    github = config["github"]
    if not isinstance(github, dict):
        raise ConfigurationError("'github' must be a dictionary")

    for key in github:
        if key not in DEFAULT_CONFIG["github"]:
            raise ConfigurationError(f"Unknown configuration option 'github.{key}'")

    if "api_url" in github and not isinstance(github["api_url"], str):
        raise ConfigurationError("'github.api_url' must be a string")

    if "timeout" in github:
        _validate_positive_int(github["timeout"], "github.timeout")


def _validate_exclude_actions(config: Dict[str, Any]) -> None:
    if "exclude_actions" not in config:
        return

    excluded = config["exclude_actions"]
    if not isinstance(excluded, list) or not all(isinstance(a, str) for a in excluded):
        raise ConfigurationError("'exclude_actions' must be a list of action names")


def _validate_report(config: Dict[str, Any]) -> None:
    if "report" not in config:
        return

    report = config["report"]
    if not isinstance(report, dict):
        raise ConfigurationError("'report' must be a dictionary")

    for key, value in report.items():
        if key not in DEFAULT_CONFIG["report"]:
            raise ConfigurationError(f"Unknown configuration option 'report.{key}'")
        if not isinstance(value, bool):
            raise ConfigurationError(f"'report.{key}' must be a boolean")


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration structure and values"""

    for key in config.keys():
        if key not in DEFAULT_CONFIG:
            raise ConfigurationError(f"Unknown configuration option '{key}'")

    if "max_workers" in config:
        _validate_positive_int(config["max_workers"], "max_workers")

    if "create_backup" in config and not isinstance(config["create_backup"], bool):
        raise ConfigurationError("'create_backup' must be a boolean (true/false)")

    _validate_github(config)
    _validate_exclude_actions(config)
    _validate_report(config)


def _read_config_file(config_path: str) -> Optional[Dict[str, Any]]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML configuration: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if user_config is None:
        return None

    if not isinstance(user_config, dict):
        raise ConfigurationError(f"Configuration in {config_path} must be a mapping")

    validate_config(user_config)
    return user_config


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file or use defaults

    Args:
        config_path: Path to configuration file, or None to auto-detect

    Returns:
        Loaded configuration dictionary

    Raises:
        ConfigurationError: If configuration file is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        user_config = _read_config_file(config_path)
        if user_config:
            config = merge_configs(config, user_config)
    else:
        for path in get_config_paths():
            if not os.path.exists(path):
                continue

            logger.debug("Loading configuration from %s", path)
            user_config = _read_config_file(path)
            if user_config:
                config = merge_configs(config, user_config)
            break

    return config


def generate_default_config(output_path: Optional[str] = None) -> str:
    """
    Generate default configuration YAML

    Args:
        output_path: Path to save default configuration to, or None to return as string

    Returns:
        Default configuration YAML

    Raises:
        ConfigurationError: If configuration cannot be saved
    """
    default_config_yaml = cast(
        str,
        yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False),
    )

    if output_path:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

            with open(output_path, "w", encoding="utf-8") as f:
                f.write(default_config_yaml)
        except OSError as e:
            raise ConfigurationError(f"Error saving default configuration: {e}")

    return default_config_yaml
