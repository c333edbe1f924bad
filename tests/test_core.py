"""Tests for the core kindle2notion functionality."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from kindle2notion.core import Kindle2Notion, archive_clippings, mark_consumed
from kindle2notion.exceptions import ProcessingError, ValidationError
from kindle2notion.parser import KindleClippingsParser

FIXTURE_FILE = Path(__file__).parent / "fixtures" / "clippings_sample.txt"

# Constants to replace magic numbers
SAMPLE_BOOKS = 3
SAMPLE_CLIPS = 5

RECORD = (
    "Fahrenheit 451 (Ray Bradbury)\n"
    "- Your Highlight at location 100-101 | Added on Tuesday, 1 December 2020 16:58:58\n"
    "\n"
    "It was a pleasure to burn.\n"
    "==========\n"
)

SECOND_RECORD = (
    "Fahrenheit 451 (Ray Bradbury)\n"
    "- Your Highlight at location 200-201 | Added on Tuesday, 1 December 2020 17:00:00\n"
    "\n"
    "We need not to be let alone.\n"
    "==========\n"
)


@pytest.fixture
def clippings_file(tmp_path):
    """Fixture providing a writable copy of the sample clippings file."""
    path = tmp_path / "My Clippings.txt"
    path.write_bytes(FIXTURE_FILE.read_bytes())
    return path


@pytest.fixture
def mock_client():
    """Fixture providing a mocked Notion client that accepts everything."""
    client = MagicMock()
    client.validate_token.return_value = True
    client.upload_books.side_effect = lambda books, _: {"sent": len(books), "failed": 0}
    return client


@pytest.fixture
def app(clippings_file, mock_client):
    """Fixture providing a Kindle2Notion app with the Notion client replaced."""
    app = Kindle2Notion(clippings_file=str(clippings_file), notion_token="test_token", parent_page_id="page-id")
    app.notion_client = mock_client
    return app


class TestMarkConsumed:
    def test_marker_makes_file_read_as_empty(self, tmp_path):
        path = tmp_path / "My Clippings.txt"
        path.write_text(RECORD, encoding="utf-8")

        assert mark_consumed(path) is True
        assert path.read_text(encoding="utf-8") == RECORD + "==========\n"
        assert KindleClippingsParser().parse(path.read_text(encoding="utf-8")) == []

    def test_new_records_after_marker_are_read(self, tmp_path):
        path = tmp_path / "My Clippings.txt"
        path.write_text(RECORD, encoding="utf-8")
        mark_consumed(path)

        with open(path, "a", encoding="utf-8") as f:
            f.write(SECOND_RECORD)

        books = KindleClippingsParser().parse(path.read_text(encoding="utf-8"))
        assert len(books) == 1
        assert [clip.content for clip in books[0].clips] == ["We need not to be let alone."]

    def test_already_marked(self, tmp_path):
        path = tmp_path / "My Clippings.txt"
        path.write_text(RECORD + "==========\n", encoding="utf-8")

        assert mark_consumed(path) is False
        assert path.read_text(encoding="utf-8") == RECORD + "==========\n"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "My Clippings.txt"
        path.write_text("", encoding="utf-8")

        assert mark_consumed(path) is False
        assert path.read_text(encoding="utf-8") == ""

    def test_missing_trailing_delimiter(self, tmp_path):
        path = tmp_path / "My Clippings.txt"
        path.write_text(RECORD.removesuffix("==========\n"), encoding="utf-8")

        assert mark_consumed(path) is True
        assert path.read_text(encoding="utf-8").endswith("It was a pleasure to burn.\n==========\n==========\n")


def test_archive_clippings(clippings_file, tmp_path):
    archive_dir = tmp_path / "archive"

    target = archive_clippings(clippings_file, archive_dir)

    assert target.parent == archive_dir
    assert target.name.startswith("My Clippings-")
    assert target.suffix == ".txt"
    assert target.read_bytes() == clippings_file.read_bytes()


class TestValidateSetup:
    def test_valid(self, app, mock_client):
        app.validate_setup()
        mock_client.validate_token.assert_called_once()

    def test_missing_file(self, app, tmp_path):
        app.clippings_file = tmp_path / "missing.txt"
        with pytest.raises(ValidationError, match="Clippings file not found"):
            app.validate_setup()

    def test_missing_page_id(self, app):
        app.parent_page_id = ""
        with pytest.raises(ValidationError, match="parent page"):
            app.validate_setup()

    def test_invalid_token(self, app, mock_client):
        mock_client.validate_token.return_value = False
        with pytest.raises(ValidationError, match="Invalid Notion API token"):
            app.validate_setup()

    def test_dry_run_skips_notion(self, app, mock_client):
        app.dry_run = True
        app.parent_page_id = ""
        app.validate_setup()
        mock_client.validate_token.assert_not_called()


class TestProcess:
    def test_uploads_and_marks(self, app, mock_client, clippings_file):
        stats = app.process()

        assert stats.books_found == SAMPLE_BOOKS
        assert stats.clips_found == SAMPLE_CLIPS
        assert stats.pages_sent == SAMPLE_BOOKS
        assert stats.pages_failed == 0
        assert stats.marker_written is True
        mock_client.upload_books.assert_called_once()
        books, page_id = mock_client.upload_books.call_args.args
        assert [book.book_name for book in books] == [
            "How to Win Friends and Influence People",
            "Building a Second Brain: A Proven Method to Organize Your Digital Life and Unlock Your Creative Potential (2022)",
            "How to Win Friends and Influence People",
        ]
        assert page_id == "page-id"

        # A second run finds nothing new
        second = app.process()
        assert second.books_found == 0
        assert second.marker_written is False
        assert mock_client.upload_books.call_count == 1

    def test_dry_run_does_not_upload_or_mark(self, app, mock_client, clippings_file):
        original = clippings_file.read_bytes()
        app.dry_run = True

        stats = app.process()

        assert stats.pages_sent == SAMPLE_BOOKS
        assert stats.marker_written is False
        mock_client.upload_books.assert_not_called()
        assert clippings_file.read_bytes() == original

    def test_failed_upload_leaves_file_unmarked(self, app, mock_client, clippings_file):
        original = clippings_file.read_bytes()
        mock_client.upload_books.side_effect = None
        mock_client.upload_books.return_value = {"sent": 2, "failed": 1}

        stats = app.process()

        assert stats.pages_failed == 1
        assert stats.marker_written is False
        assert clippings_file.read_bytes() == original

    def test_no_marker_option(self, app, clippings_file):
        original = clippings_file.read_bytes()
        app.write_resume_marker = False

        stats = app.process()

        assert stats.marker_written is False
        assert clippings_file.read_bytes() == original

    def test_archive_before_marking(self, app, clippings_file, tmp_path):
        original = clippings_file.read_bytes()
        app.archive_dir = tmp_path / "archive"

        stats = app.process()

        assert stats.archived_to is not None
        assert stats.archived_to.read_bytes() == original
        assert stats.marker_written is True

    def test_malformed_file(self, app, clippings_file):
        clippings_file.write_text("Just a title line\n==========\n", encoding="utf-8")
        with pytest.raises(ProcessingError, match="record 1"):
            app.process()
