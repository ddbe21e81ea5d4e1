"""Configuration management for Tax Calc.

Configuration lives in one directory:

1. settings.json - Tool preferences
   - deductions_file: path to deductions.yaml (optional, if not colocated)
   - default_output_format: "text" or "json"

2. deductions.yaml - Administrator-configured deduction values
   - personal: personal deduction
   - k_receipt: ceiling for k-receipt allowances

Config directory resolution:
1. TAX_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/tax-calc/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "tax-calc"
SETTINGS_FILENAME = "settings.json"
DEDUCTIONS_FILENAME = "deductions.yaml"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. TAX_CALC_CONFIG_PATH environment variable
    2. ~/.config/tax-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("TAX_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value, or default if not set."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_deductions_path() -> Path:
    """Get the path to deductions.yaml.

    Resolution order:
    1. settings.json "deductions_file" key (if set)
    2. deductions.yaml in config directory
    """
    custom = get_setting("deductions_file")
    if custom:
        return Path(custom).expanduser()
    return get_config_dir() / DEDUCTIONS_FILENAME
