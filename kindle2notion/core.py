"""Core functionality for kindle2notion application."""

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path

from .exceptions import ClippingsParseError, ProcessingError, ValidationError
from .notion import NotionAPIClient
from .parser import BookClips, KindleClippingsParser

logger = logging.getLogger(__name__)

RESUME_MARKER_LINE = KindleClippingsParser.SEPARATOR + "\n"


@dataclass
class ExportStats:
    """Statistics for an export session."""

    books_found: int = 0
    clips_found: int = 0
    pages_sent: int = 0
    pages_failed: int = 0
    marker_written: bool = False
    archived_to: Path | None = None


def mark_consumed(clippings_file: Path) -> bool:
    """Append a resume marker so the next run skips everything already in the file.

    The file normally ends with a delimiter line; one more delimiter line turns
    it into a resume marker. Nothing is written to an empty file or to one that
    already ends in a marker.

    Returns:
        True if the marker was written
    """
    content = clippings_file.read_text(encoding="utf-8-sig")
    if not content.strip():
        logger.debug("Not marking empty clippings file %s.", clippings_file)
        return False

    lines = content.splitlines()
    if lines[-2:] == [KindleClippingsParser.SEPARATOR] * 2:
        logger.debug("Clippings file %s already ends with a resume marker.", clippings_file)
        return False

    prefix = "" if content.endswith("\n") else "\n"
    if lines[-1] != KindleClippingsParser.SEPARATOR:
        # The last record has no closing delimiter yet
        prefix += RESUME_MARKER_LINE

    with open(clippings_file, "a", encoding="utf-8") as f:
        f.write(prefix + RESUME_MARKER_LINE)
    logger.info("Wrote resume marker to %s.", clippings_file)
    return True


def archive_clippings(clippings_file: Path, archive_dir: Path) -> Path:
    """Copy the clippings file into archive_dir under a timestamped name.

    Returns:
        Path of the archived copy
    """
    archive_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    target = archive_dir / f"{clippings_file.stem}-{timestamp}{clippings_file.suffix}"
    shutil.copy2(clippings_file, target)
    logger.info("Archived %s to %s.", clippings_file, target)
    return target


class Kindle2Notion:
    """Main application class for kindle2notion."""

    def __init__(
        self,
        clippings_file: str,
        notion_token: str,
        parent_page_id: str,
        dry_run: bool = False,
        tz: tzinfo | None = None,
        write_resume_marker: bool = True,
        archive_dir: Path | None = None,
    ):
        """Initialize the application."""
        self.clippings_file = Path(clippings_file)
        self.parent_page_id = parent_page_id
        self.dry_run = dry_run
        self.write_resume_marker = write_resume_marker
        self.archive_dir = archive_dir

        self.parser = KindleClippingsParser(tz=tz)
        self.notion_client = NotionAPIClient(notion_token)
        logger.info("Kindle2Notion initialized. Dry run mode: %s", self.dry_run)

    def validate_setup(self) -> None:
        """Validate the clippings file, the parent page and the Notion token.

        Raises:
            ValidationError: If any part of the setup is unusable
        """
        logger.info("Validating setup...")
        if not self.clippings_file.exists():
            raise ValidationError(f"Clippings file not found: {self.clippings_file}")
        logger.debug("Clippings file found: %s", self.clippings_file)

        if self.dry_run:
            logger.info("Dry run mode active - skipping Notion validation.")
            return

        if not self.parent_page_id:
            raise ValidationError("No Notion parent page configured.")

        if not self.notion_client.validate_token():
            raise ValidationError("Invalid Notion API token.")
        logger.info("Setup validation successful.")

    def load_books(self) -> list[BookClips]:
        """Read the clippings file and parse it into books.

        Raises:
            ProcessingError: If the file cannot be read or a record fails to parse
        """
        try:
            content = self.clippings_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ProcessingError(f"Could not read clippings file: {self.clippings_file}") from e
        logger.debug("Read %d characters from %s", len(content), self.clippings_file)

        try:
            return self.parser.parse(content)
        except ClippingsParseError as e:
            raise ProcessingError(f"Could not parse {self.clippings_file}: {e}") from e

    def process(self) -> ExportStats:
        """Parse the clippings file and publish every book to Notion."""
        logger.info("Starting processing for clippings file: %s", self.clippings_file)
        start_time = datetime.now()
        stats = ExportStats()

        books = self.load_books()
        stats.books_found = len(books)
        stats.clips_found = sum(len(book.clips) for book in books)
        logger.info("Parsed %d clips in %d books.", stats.clips_found, stats.books_found)

        if not books:
            logger.info("No new clips to export.")
        elif self.dry_run:
            logger.info("DRY RUN: Would have created %d pages in Notion.", len(books))
            stats.pages_sent = len(books)
        else:
            result = self.notion_client.upload_books(books, self.parent_page_id)
            stats.pages_sent = result["sent"]
            stats.pages_failed = result["failed"]

        if not self.dry_run and books and stats.pages_failed == 0:
            self._finish_consumed_file(stats)
        elif stats.pages_failed:
            logger.warning("%d pages failed to upload; leaving %s unmarked.", stats.pages_failed, self.clippings_file)

        duration = datetime.now() - start_time
        logger.info("Processing finished in %.2f seconds. Results: %s", duration.total_seconds(), stats)
        return stats

    def _finish_consumed_file(self, stats: ExportStats) -> None:
        """Archive and mark the clippings file after a fully successful upload."""
        if self.archive_dir:
            stats.archived_to = archive_clippings(self.clippings_file, self.archive_dir)
        if self.write_resume_marker:
            stats.marker_written = mark_consumed(self.clippings_file)
