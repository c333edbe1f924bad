import logging
from collections.abc import Iterable
from itertools import groupby

from .models import BookClips, Clip

logger = logging.getLogger(__name__)


def group_clips(clips: Iterable[Clip]) -> list[BookClips]:
    """Group consecutive clips of the same book into BookClips.

    Only adjacent clips are merged: a book that shows up again later in the
    file, after clips of another book, starts a new BookClips entry. Output
    order follows file order.

    Args:
        clips: Parsed clips in file order

    Returns:
        List of BookClips in file order
    """
    books = []
    for (book_name, author), group in groupby(clips, key=lambda clip: (clip.book, clip.author)):
        book_clips = BookClips(book_name=book_name, author=author, clips=list(group))
        logger.debug("Grouped %d clips for '%s' by %s.", len(book_clips.clips), book_name, author)
        books.append(book_clips)
    return books
