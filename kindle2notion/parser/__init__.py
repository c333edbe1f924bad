from .dates import ENGLISH_MONTHS, parse_date
from .grouping import group_clips
from .models import BookClips, Clip, ParseResult, RejectedRecord
from .parser import KindleClippingsParser, parse_clips, split_records

__all__ = [
    "ENGLISH_MONTHS",
    "BookClips",
    "Clip",
    "KindleClippingsParser",
    "ParseResult",
    "RejectedRecord",
    "group_clips",
    "parse_clips",
    "parse_date",
    "split_records",
]
