"""Preview command handler for the kindle2notion CLI."""

import logging
import sys

from ...config import get_timezone
from ...exceptions import ClippingsParseError, ValidationError
from ...parser import KindleClippingsParser
from ..utils.common import resolve_clippings_path
from ..utils.formatters import format_books_json, format_books_text, format_rejected

logger = logging.getLogger(__name__)


def handle_preview(args):
    """Parse the clippings file and print the books it contains, without uploading."""
    clippings_file = resolve_clippings_path(args)
    if not clippings_file.exists():
        logger.critical("Clippings file not found: %s", clippings_file)
        sys.exit(1)

    try:
        parser = KindleClippingsParser(tz=get_timezone())
    except ValidationError as e:
        logger.critical("%s", e)
        sys.exit(1)

    try:
        content = clippings_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.critical("Could not read clippings file %s: %s", clippings_file, e)
        sys.exit(1)

    if args.skip_invalid:
        result = parser.parse_with_rejects(content)
        books = result.books
    else:
        try:
            books = parser.parse(content)
        except ClippingsParseError as e:
            logger.critical("Could not parse %s: %s", clippings_file, e)
            sys.exit(1)
        result = None

    if args.format == "json":
        print(format_books_json(books))
    else:
        print(format_books_text(books))

    if result is not None and not result.ok:
        print(format_rejected(result), file=sys.stderr)
        sys.exit(1)
