"""Configuration management for kindle2notion.

This module handles reading and writing configuration settings,
including storage of the Notion token and the target parent page.
"""

import json
import logging
import os
import platform
from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kindle2notion.exceptions import ValidationError
from kindle2notion.utils.credentials import load_token_from_file, mask_token, save_token_to_file

logger = logging.getLogger(__name__)

APP_NAME = "kindle2notion"

# Default configuration settings
DEFAULT_CONFIG = {
    "notion_page_id": "",
    "log_level": "INFO",
    "timezone": "",  # Empty means the host's local time zone
    "write_resume_marker": True,
    "archive_dir": "",
}


def get_config_dir() -> Path:
    """Get the platform-specific configuration directory."""
    system = platform.system()
    home = Path.home()

    if system == "Darwin":  # macOS
        config_dir = home / "Library" / "Application Support" / APP_NAME
    elif system == "Windows":
        config_dir = Path(os.getenv("APPDATA", str(home / "AppData" / "Roaming"))) / APP_NAME
    else:  # Linux and others
        config_dir = home / ".config" / APP_NAME

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_data_dir() -> Path:
    """Get the platform-specific data directory."""
    data_dir = get_config_dir() / "data"
    data_dir.mkdir(exist_ok=True)
    return data_dir


def get_credentials_dir() -> Path:
    """Get the directory for storing credentials."""
    creds_dir = get_config_dir() / "credentials"
    creds_dir.mkdir(exist_ok=True)
    return creds_dir


def get_token_file_path() -> Path:
    """Get the path to the Notion token file."""
    return get_credentials_dir() / "notion_token"


@lru_cache(maxsize=1)
def get_config_file_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load configuration from file, falling back to defaults."""
    config_file = get_config_file_path()

    if not config_file.exists():
        logger.debug("No configuration file at %s, using defaults.", config_file)
        return DEFAULT_CONFIG.copy()

    try:
        with open(config_file) as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading configuration: {e}")
        logger.info("Using default configuration instead")
        return DEFAULT_CONFIG.copy()

    logger.debug(f"Loaded configuration from {config_file}")
    # Merge with defaults to ensure all keys exist
    merged_config = DEFAULT_CONFIG.copy()
    merged_config.update(config)
    return merged_config


def save_config(config: dict[str, Any]) -> bool:
    """Save configuration to file.

    Args:
        config: Configuration dictionary to save

    Returns:
        bool: True if successful, False otherwise
    """
    config_file = get_config_file_path()
    try:
        with open(config_file, "w") as f:
            json.dump(config, f, indent=2)
    except OSError as e:
        logger.error(f"Error saving configuration: {e}")
        return False

    logger.debug(f"Saved configuration to {config_file}")
    return True


def get_config_value(key: str, default: Any = None) -> Any:
    """Get a configuration value by key.

    Args:
        key: The configuration key to retrieve
        default: Default value to return if key not found

    Returns:
        The configuration value or default if not found
    """
    return load_config().get(key, default)


def set_config_value(key: str, value: Any) -> bool:
    """Set a configuration value.

    Args:
        key: The configuration key to set
        value: The value to set

    Returns:
        bool: True if successful, False otherwise
    """
    config = load_config()
    config[key] = value
    return save_config(config)


def set_notion_token(token: str) -> bool:
    """Store the Notion integration token.

    Args:
        token: The Notion token

    Returns:
        bool: True if stored successfully, False otherwise
    """
    if not token:
        logger.warning("Attempting to store empty Notion token")
        return False

    logger.info(f"Storing Notion token {mask_token(token)}")
    return save_token_to_file(token, get_token_file_path())


def get_notion_token() -> str:
    """Retrieve the stored Notion token.

    Returns:
        str: The stored token or empty string if not set
    """
    token = load_token_from_file(get_token_file_path())
    if token:
        logger.debug(f"Retrieved Notion token: {mask_token(token)}")
    else:
        logger.debug("No Notion token found")
    return token


def get_timezone() -> tzinfo | None:
    """Get the configured reader time zone.

    Returns:
        ZoneInfo for the configured name, or None for the host's local zone

    Raises:
        ValidationError: If the configured name is not a known time zone
    """
    name = get_config_value("timezone", "")
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown time zone in configuration: {name}") from e


def is_configured() -> bool:
    """Check if both a Notion token and a parent page are configured."""
    return bool(get_notion_token()) and bool(get_config_value("notion_page_id"))


def list_config() -> dict[str, Any]:
    """Get all configuration values for display, with the token masked."""
    display_config = load_config().copy()

    token = get_notion_token()
    display_config["notion_token"] = mask_token(token) if token else "[Not Set]"
    return display_config
