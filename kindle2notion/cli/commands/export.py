"""Export command handler for the kindle2notion CLI."""

import logging
import sys
from pathlib import Path

from ...config import get_config_value, get_timezone
from ...core import Kindle2Notion
from ...exceptions import ProcessingError, ValidationError
from ..utils.common import (
    NOTION_TOKEN_ENV_VAR,
    get_notion_token_cli,
    get_parent_page_id_cli,
    resolve_clippings_path,
)
from ..utils.formatters import format_export_summary

logger = logging.getLogger(__name__)


def handle_export(args):
    """Handle the 'export' command."""
    logger.info("Starting 'export' command.")

    clippings_file = resolve_clippings_path(args)
    notion_token = _get_export_token(args)
    parent_page_id = get_parent_page_id_cli(args) or ""

    try:
        app = Kindle2Notion(
            clippings_file=str(clippings_file),
            notion_token=notion_token,
            parent_page_id=parent_page_id,
            dry_run=args.dry_run,
            tz=get_timezone(),
            write_resume_marker=_should_write_marker(args),
            archive_dir=_get_archive_dir(args),
        )
        app.validate_setup()
        logger.info("Setup valid. Starting export process...")
        stats = app.process()
    except ValidationError as e:
        logger.critical("Setup validation failed: %s", str(e))
        sys.exit(1)
    except ProcessingError as e:
        logger.critical("Processing failed: %s", str(e))
        sys.exit(1)

    print(format_export_summary(stats, clippings_file, args.dry_run))
    if stats.pages_failed > 0:
        sys.exit(1)


def _get_export_token(args) -> str:
    """Get the Notion token for the export command; only a dry run may go without one."""
    notion_token = get_notion_token_cli(args)
    if notion_token:
        return notion_token
    if args.dry_run:
        return ""

    logger.critical(
        "Notion token not provided. Set it using the --api-token flag, the %s environment variable, "
        "or by running 'kindle2notion config token'.",
        NOTION_TOKEN_ENV_VAR,
    )
    sys.exit(1)


def _should_write_marker(args) -> bool:
    if args.no_marker:
        return False
    return bool(get_config_value("write_resume_marker", True))


def _get_archive_dir(args) -> Path | None:
    archive_dir = args.archive_dir or get_config_value("archive_dir", "")
    return Path(archive_dir).expanduser() if archive_dir else None
