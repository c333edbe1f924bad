"""Configuration command handler for the kindle2notion CLI."""

import getpass
import logging
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...config import (
    DEFAULT_CONFIG,
    get_config_dir,
    get_config_value,
    get_data_dir,
    get_notion_token,
    is_configured,
    list_config,
    set_config_value,
    set_notion_token,
)
from ...utils.credentials import mask_token

logger = logging.getLogger(__name__)

BOOLEAN_KEYS = ("write_resume_marker",)
TRUE_VALUES = ("true", "yes", "1", "on")
FALSE_VALUES = ("false", "no", "0", "off")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def handle_configure(args):
    """Handle the 'config' command and its subcommands."""
    command = getattr(args, "config_command", None) or "show"

    if command == "show":
        handle_config_show(args)
    elif command == "token":
        handle_config_token(args)
    elif command == "set":
        handle_config_set(args)
    elif command == "paths":
        handle_config_paths(args)
    else:
        logger.error(f"Unknown config subcommand: {command}")
        sys.exit(1)


def handle_config_show(_):
    """Show current configuration."""
    print("\n--- Current Configuration ---")
    for key, value in list_config().items():
        print(f"{key}: {value}")

    print(f"\nConfiguration directory: {get_config_dir()}")

    if is_configured():
        print("\nApplication is properly configured.")
        return

    print("\nWARNING: Application is not fully configured.")
    if not get_notion_token():
        print("Missing Notion token. Set it with 'kindle2notion config token'.")
    if not get_config_value("notion_page_id"):
        print("Missing parent page. Set it with 'kindle2notion config set notion_page_id PAGE_ID'.")


def handle_config_token(args):
    """Store the Notion integration token, prompting for it if not given."""
    token = args.token
    if not token:
        try:
            token = getpass.getpass("Enter your Notion integration token: ")
        except (KeyboardInterrupt, EOFError):
            print("\nOperation cancelled.")
            return
        if not token:
            print("No token provided. Operation cancelled.")
            return

    if not set_notion_token(token):
        logger.error("Failed to save Notion token.")
        print("Failed to save Notion token.")
        sys.exit(1)

    logger.info("Notion token successfully saved.")
    print(f"Notion token {mask_token(token)} successfully saved.")


def _coerce_config_value(key: str, raw_value: str):
    """Convert a command line string to the type stored for key.

    Raises:
        ValueError: If the value is not valid for the key
    """
    if key in BOOLEAN_KEYS:
        if raw_value.lower() in TRUE_VALUES:
            return True
        if raw_value.lower() in FALSE_VALUES:
            return False
        raise ValueError("Invalid boolean value. Use 'true' or 'false'.")

    if key == "log_level":
        if raw_value.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level. Valid values are: {', '.join(LOG_LEVELS)}")
        return raw_value.upper()

    if key == "timezone" and raw_value:
        try:
            ZoneInfo(raw_value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {raw_value}") from e

    return raw_value


def handle_config_set(args):
    """Set a configuration value."""
    if args.key not in DEFAULT_CONFIG:
        logger.error(f"Unknown configuration key: {args.key}")
        print(f"Error: Unknown configuration key: {args.key}")
        print(f"Valid keys are: {', '.join(DEFAULT_CONFIG)}")
        sys.exit(1)

    try:
        value = _coerce_config_value(args.key, args.value)
    except ValueError as e:
        logger.error(f"Invalid value for {args.key}: {args.value}")
        print(f"Error: {e}")
        sys.exit(1)

    if not set_config_value(args.key, value):
        logger.error(f"Failed to set configuration value: {args.key}")
        print("Error: Failed to update configuration.")
        sys.exit(1)

    logger.info(f"Configuration value set: {args.key} = {value}")
    print(f"Configuration updated: {args.key} = {value}")


def handle_config_paths(_):
    """Show configuration and data paths."""
    print("\n--- Application Paths ---")
    print(f"Configuration directory: {get_config_dir()}")
    print(f"Data directory: {get_data_dir()}")
    print(f"Archive directory: {get_config_value('archive_dir') or '[Not Set]'}")
    print(f"Detected platform: {sys.platform}")
