"""Parsing of the 'Added on ...' date clause of a clipping.

Kindle writes the date in the language the device is set to, which has nothing
to do with the locale of the machine reading the file. Month names are resolved
through an explicit table instead of ``strptime("%B")``.
"""

import logging
import re
from collections.abc import Mapping
from datetime import datetime, tzinfo

from ..exceptions import NumericFormatError, StructuralParseError, UnknownMonthError

logger = logging.getLogger(__name__)

ENGLISH_MONTHS: Mapping[str, int] = {
    "January": 1,
    "February": 2,
    "March": 3,
    "April": 4,
    "May": 5,
    "June": 6,
    "July": 7,
    "August": 8,
    "September": 9,
    "October": 10,
    "November": 11,
    "December": 12,
}

WEEKDAY_SEPARATOR = ", "

# "<Day> <Month> <Year> <HH>:<MM>:<SS>", single spaces only
DATE_RE = re.compile(r"^(\d{1,2}) (\S+) (\d{4}) (\d{2}):(\d{2}):(\d{2})$", re.ASCII)


def strip_weekday(clause: str) -> str:
    """Drop everything up to and including the first ', ' of an 'Added on' clause.

    Args:
        clause: Text such as "Added on Tuesday, 1 December 2020 16:58:58"

    Returns:
        The date part, e.g. "1 December 2020 16:58:58"

    Raises:
        StructuralParseError: If the clause has no ', ' separator
    """
    _, sep, rest = clause.partition(WEEKDAY_SEPARATOR)
    if not sep:
        raise StructuralParseError(f"date clause has no weekday separator: '{clause}'")
    return rest


def parse_date(text: str, months: Mapping[str, int] = ENGLISH_MONTHS, tz: tzinfo | None = None) -> datetime:
    """Parse a date such as "1 December 2020 16:58:58" into an aware datetime.

    The export carries no UTC offset, so the value is read as wall-clock time in
    ``tz``; when ``tz`` is None the host's local time zone is used.

    Args:
        text: Date text without the weekday prefix
        months: Closed mapping of month names to month numbers
        tz: Time zone of the reader

    Returns:
        Timezone-aware datetime

    Raises:
        StructuralParseError: If the text is not laid out as expected
        UnknownMonthError: If the month name is not in ``months``
        NumericFormatError: If a day or time component is out of range
    """
    match = DATE_RE.match(text)
    if not match:
        raise StructuralParseError(f"malformed date: '{text}'")

    day, month_name, year, hour, minute, second = match.groups()
    month = months.get(month_name)
    if month is None:
        raise UnknownMonthError(month_name)

    try:
        naive = datetime(int(year), month, int(day), int(hour), int(minute), int(second))
    except ValueError as e:
        raise NumericFormatError(f"date out of range: '{text}' ({e})") from e

    if tz is None:
        # astimezone() on a naive value assumes host local time
        return naive.astimezone()
    return naive.replace(tzinfo=tz)
