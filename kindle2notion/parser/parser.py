import logging
import re
from collections.abc import Mapping
from datetime import tzinfo

from ..exceptions import ClippingsParseError, NumericFormatError, StructuralParseError
from .dates import ENGLISH_MONTHS, parse_date, strip_weekday
from .grouping import group_clips
from .models import BookClips, Clip, ParseResult, RejectedRecord

# Initialize logger for this module
logger = logging.getLogger(__name__)


class KindleClippingsParser:
    """Parser for the text of a Kindle 'My Clippings.txt' file.

    The parser works on an in-memory string and knows nothing about where it
    came from. Records are parsed independently of each other and then
    grouped per book in file order.
    """

    SEPARATOR = "=========="
    BOM = "\ufeff"

    # Preview length limits for log messages
    TITLE_PREVIEW_LENGTH = 80
    CONTENT_PREVIEW_LENGTH = 200

    # A delimiter line, also accepted at the very end of the file without a line break
    RECORD_DELIMITER_RE = re.compile(r"^==========(?:\r?\n|\Z)", re.MULTILINE)
    # Two delimiter lines in a row mark the end of an already processed run
    RESUME_MARKER_RE = re.compile(r"^==========\r?\n==========(?:\r?\n|\Z)", re.MULTILINE)

    # Lazy title: the author is the first " (" group that runs to the end of the line.
    # The optional ")" inside the author group keeps one nested group in the author.
    TITLE_AUTHOR_RE = re.compile(r"^(?P<title>.*?) \((?P<author>[^)]*\)?)\)$")

    # Location clause formats, in order of preference
    PAGED_LOCATION_RE = re.compile(r"^- Your (?P<kind>\w+) on page (?P<page>[^|]*?) \| [Ll]ocation (?P<span>.*?) \|")
    UNPAGED_LOCATION_RE = re.compile(r"^- Your (?P<kind>\w+) (?:at|on) [Ll]ocation (?P<span>.*?) \|")
    LOCATION_FORMATS = (("paged", PAGED_LOCATION_RE), ("unpaged", UNPAGED_LOCATION_RE))

    # <start>, exactly one separator character, <end>
    LOCATION_SPAN_RE = re.compile(r"^([0-9]+)([^0-9])([0-9]+)$")

    def __init__(self, months: Mapping[str, int] = ENGLISH_MONTHS, tz: tzinfo | None = None):
        """Initialize the parser.

        Args:
            months: Month name lookup used for the date clause
            tz: Time zone of the reader; None means the host's local time zone
        """
        self.months = months
        self.tz = tz
        logger.debug("Initializing KindleClippingsParser (tz=%s, %d month names).", tz or "local", len(months))

    def parse(self, content: str) -> list[BookClips]:
        """Parse clippings text and group the clips per book.

        Any malformed record aborts the whole parse.

        Args:
            content: Full text of a clippings file

        Returns:
            List of BookClips in file order

        Raises:
            ClippingsParseError: On the first record that fails to parse
        """
        clips = self.parse_clips(content)
        books = group_clips(clips)
        logger.info("Parsing complete. Clips: %d, Books: %d", len(clips), len(books))
        return books

    def parse_clips(self, content: str) -> list[Clip]:
        """Parse clippings text into a flat list of clips, aborting on the first bad record."""
        raw_records = self.split_records(content)
        return [self.parse_record(raw, index) for index, raw in enumerate(raw_records, start=1)]

    def parse_with_rejects(self, content: str) -> ParseResult:
        """Parse clippings text, keeping going past records that fail to parse.

        Args:
            content: Full text of a clippings file

        Returns:
            ParseResult with the grouped books and the rejected records
        """
        clips = []
        rejected = []
        for index, raw in enumerate(self.split_records(content), start=1):
            try:
                clips.append(self.parse_record(raw, index))
            except ClippingsParseError as e:
                rejected.append(RejectedRecord(record_index=index, raw_record=raw, error=str(e)))

        books = group_clips(clips)
        logger.info(
            "Parsing complete. Clips: %d, Books: %d, Rejected records: %d", len(clips), len(books), len(rejected)
        )
        return ParseResult(books=books, rejected=rejected)

    def split_records(self, content: str) -> list[str]:
        """Split content into raw records.

        Text up to and including the last resume marker is skipped. Empty
        sections, such as the one after the final delimiter, are dropped.

        Args:
            content: Full content of clippings file

        Returns:
            List of raw record strings
        """
        content = content.removeprefix(self.BOM)
        markers = list(self.RESUME_MARKER_RE.finditer(content))
        if markers:
            live_start = markers[-1].end()
            logger.info("Resume marker found, skipping %d already processed characters.", live_start)
            content = content[live_start:]

        sections = self.RECORD_DELIMITER_RE.split(content)
        raw_records = [section for section in sections if section.strip()]
        logger.debug("Split content into %d sections, %d records.", len(sections), len(raw_records))
        return raw_records

    def parse_record(self, raw_record: str, record_index: int | None = None) -> Clip:
        """Parse a single raw record.

        Args:
            raw_record: Text of one record, without the delimiter
            record_index: 1-based index of the record, for error reporting

        Returns:
            The parsed Clip

        Raises:
            ClippingsParseError: If any part of the record is malformed
        """
        try:
            title_line, rest = self._take_line(raw_record, "title")
            book, author = self._parse_title_author(title_line)

            metadata_line, rest = self._take_line(rest, "metadata")
            kind, page, location, date_clause = self._parse_location(metadata_line)
            date = parse_date(strip_weekday(date_clause), self.months, self.tz)

            blank_line, rest = self._take_line(rest, "blank")
            if blank_line.strip():
                raise StructuralParseError(f"expected a blank line after metadata, got '{blank_line}'")

            clip = Clip(
                book=book,
                author=author,
                content=self._extract_content(rest),
                date=date,
                location=location,
                kind=kind,
                page=page,
            )
        except ClippingsParseError as e:
            e.record_index = record_index
            e.raw_record = raw_record
            logger.warning(
                "Error parsing record %s: %s. Raw content snippet: '%s'",
                record_index,
                e.message,
                self._get_preview_text(raw_record, self.CONTENT_PREVIEW_LENGTH),
            )
            raise

        logger.debug(
            "Parsed record %s: '%s' by %s at %s.",
            record_index,
            self._get_preview_text(book, self.TITLE_PREVIEW_LENGTH),
            author,
            location,
        )
        return clip

    def _take_line(self, text: str, what: str) -> tuple[str, str]:
        """Split off the first line of text.

        Returns:
            Tuple of (line without its line break, remaining text)

        Raises:
            StructuralParseError: If the text has no line break
        """
        line, newline, rest = text.partition("\n")
        if not newline:
            raise StructuralParseError(f"record ends before the {what} line is complete")
        return line.removesuffix("\r"), rest

    def _get_preview_text(self, text: str, max_length: int) -> str:
        """Get a preview of text, truncated if too long."""
        if len(text) > max_length:
            return text[:max_length] + "..."
        return text

    def _parse_title_author(self, title_line: str) -> tuple[str, str]:
        """Parse the title and author from the first line of a record.

        Args:
            title_line: First line of the record, without its line break

        Returns:
            Tuple of (title, author)

        Raises:
            StructuralParseError: If the line does not end in a parenthesis group
        """
        match = self.TITLE_AUTHOR_RE.match(title_line)
        if not match:
            raise StructuralParseError(f"no author group at the end of title line '{title_line}'")

        title = match.group("title").replace(self.BOM, "").replace("\r", "").replace("\n", "")
        author = match.group("author")
        if author.count(")") > author.count("("):
            # Stray closing parenthesis left by the device
            author = author.removesuffix(")")
        return title, author

    def _parse_location(self, metadata_line: str) -> tuple[str, str | None, tuple[int, int], str]:
        """Parse the location clause of the metadata line.

        Args:
            metadata_line: Second line of the record

        Returns:
            Tuple of (kind, page, (start, end), rest of the line after the clause)

        Raises:
            StructuralParseError: If no location format matches
            NumericFormatError: If the location markers are not a numeric range
        """
        for format_name, pattern in self.LOCATION_FORMATS:
            match = pattern.match(metadata_line)
            if not match:
                continue
            logger.debug("Matched %s location format: '%s'", format_name, metadata_line)
            page = match.group("page") if "page" in pattern.groupindex else None
            location = self._parse_location_span(match.group("span"))
            return match.group("kind").lower(), page, location, metadata_line[match.end() :]

        raise StructuralParseError(f"unrecognized location clause: '{metadata_line}'")

    def _parse_location_span(self, span: str) -> tuple[int, int]:
        """Parse '<start><sep><end>' where sep is any single non-digit character."""
        match = self.LOCATION_SPAN_RE.match(span)
        if not match:
            raise NumericFormatError(f"location '{span}' is not a numeric '<start>-<end>' range")

        start, _, end = match.groups()
        start, end = int(start), int(end)
        if start > end:
            raise NumericFormatError(f"location start {start} is after end {end}")
        return start, end

    def _extract_content(self, text: str) -> str:
        """Return the record body verbatim, minus the single line break that ends it."""
        if text.endswith("\r\n"):
            return text[:-2]
        return text.removesuffix("\n")


def split_records(content: str) -> list[str]:
    """Split clippings text into raw records, honouring resume markers."""
    return KindleClippingsParser().split_records(content)


def parse_clips(
    content: str, months: Mapping[str, int] = ENGLISH_MONTHS, tz: tzinfo | None = None
) -> list[BookClips]:
    """Parse clippings text into BookClips, aborting on the first malformed record."""
    return KindleClippingsParser(months=months, tz=tz).parse(content)
