"""Output formatting utilities for CLI commands."""

import json

from ...parser import BookClips, ParseResult

# Constants for UI display formatting
BOOK_TITLE_MAX_LENGTH = 60
BOOK_TITLE_TRUNCATE_LENGTH = 57
CLIP_PREVIEW_LENGTH = 70
MAX_REJECTED_PREVIEW = 80


def _truncate(text: str, max_length: int, truncate_length: int) -> str:
    if len(text) > max_length:
        return text[:truncate_length] + "..."
    return text


def format_export_summary(stats, clippings_file, dry_run: bool) -> str:
    """Format the export summary for display."""
    output = ["\n--- Export Summary ---"]
    if dry_run:
        output.append("[DRY RUN MODE - Nothing was sent to Notion]")
    output.append(f"Clippings File: {clippings_file}")
    output.append(f"Books Found: {stats.books_found}")
    output.append(f"Clips Found: {stats.clips_found}")
    output.append(f"Pages {'To Create' if dry_run else 'Created in Notion'}: {stats.pages_sent}")

    if stats.pages_failed > 0:
        output.append(f"Pages Failed: {stats.pages_failed}")
        output.append("The clippings file was left unmarked so the next run retries everything.")
    elif dry_run:
        output.append("Dry run completed successfully.")
    elif stats.books_found:
        output.append("All books uploaded successfully!")

    if stats.archived_to:
        output.append(f"Archived To: {stats.archived_to}")
    if stats.marker_written:
        output.append("Resume marker written; already uploaded clips will be skipped next time.")

    return "\n".join(output)


def format_books_text(books: list[BookClips]) -> str:
    """Format grouped books as a human-readable listing."""
    if not books:
        return "No clips found."

    lines = [f"Found {sum(len(b.clips) for b in books)} clips in {len(books)} book groups:", ""]
    for i, book in enumerate(books, 1):
        title = _truncate(book.book_name, BOOK_TITLE_MAX_LENGTH, BOOK_TITLE_TRUNCATE_LENGTH)
        lines.append(f"{i}. {title} - {book.author} ({len(book.clips)} clips)")
        for clip in book.clips:
            start, end = clip.location
            preview = _truncate(clip.content.replace("\n", " "), CLIP_PREVIEW_LENGTH, CLIP_PREVIEW_LENGTH - 3)
            lines.append(f"   [{start}-{end}] {clip.date:%Y-%m-%d %H:%M} {preview}")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_books_json(books: list[BookClips]) -> str:
    """Format grouped books as JSON."""
    return json.dumps([book.model_dump(mode="json") for book in books], indent=2, ensure_ascii=False)


def format_rejected(result: ParseResult) -> str:
    """Format the rejected records of a record-scoped parse."""
    lines = [f"{len(result.rejected)} records could not be parsed:"]
    for rejected in result.rejected:
        first_line = rejected.raw_record.splitlines()[0] if rejected.raw_record else ""
        lines.append(f"  - {rejected.error}")
        lines.append(f"    {_truncate(first_line, MAX_REJECTED_PREVIEW, MAX_REJECTED_PREVIEW - 3)}")
    return "\n".join(lines)
