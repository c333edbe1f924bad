"""Common utility functions for CLI commands."""

import logging
import os
from pathlib import Path

from ...config import get_config_value, get_notion_token
from ..parsers import DEFAULT_CLIPPINGS_PATH

NOTION_TOKEN_ENV_VAR = "NOTION_API_KEY"
NOTION_PAGE_ENV_VAR = "NOTION_PAGE_ID"

logger = logging.getLogger(__name__)


def get_notion_token_cli(args) -> str | None:
    """Get the Notion token from args, environment variable, or config."""
    if getattr(args, "api_token", None):
        logger.debug("Using Notion token from command line argument.")
        return args.api_token

    token_from_env = os.environ.get(NOTION_TOKEN_ENV_VAR)
    if token_from_env:
        logger.debug("Using Notion token from environment variable %s.", NOTION_TOKEN_ENV_VAR)
        return token_from_env

    token_from_config = get_notion_token()
    if token_from_config:
        logger.debug("Using Notion token from configuration.")
        return token_from_config

    logger.debug("Notion token not found in args, environment variable, or configuration.")
    return None


def get_parent_page_id_cli(args) -> str | None:
    """Get the parent page ID from args, environment variable, or config."""
    if getattr(args, "page_id", None):
        return args.page_id
    return os.environ.get(NOTION_PAGE_ENV_VAR) or get_config_value("notion_page_id") or None


def resolve_clippings_path(args) -> Path:
    """Resolve the clippings file from the command line, a connected Kindle, or the working directory."""
    if args.file:
        return Path(args.file).expanduser().resolve()

    from ...utils.device_detection import find_kindle_clippings

    kindle_clippings = find_kindle_clippings()
    if kindle_clippings:
        logger.info("Using automatically detected Kindle clippings file: %s", kindle_clippings)
        return kindle_clippings

    logger.debug("No Kindle detected, falling back to ./%s", DEFAULT_CLIPPINGS_PATH)
    return (Path.cwd() / DEFAULT_CLIPPINGS_PATH).resolve()
