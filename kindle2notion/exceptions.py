"""Exceptions for the Kindle2Notion application."""


class Kindle2NotionError(Exception):
    """Base class for all application errors."""

    pass


class ValidationError(Kindle2NotionError):
    """Error raised when validation fails."""

    pass


class ProcessingError(Kindle2NotionError):
    """Error raised when processing fails."""

    pass


class ClippingsParseError(Kindle2NotionError):
    """Base class for errors raised while parsing a clippings record.

    Attributes:
        record_index: 1-based index of the offending record, if known
        raw_record: Raw text of the offending record, if known
    """

    def __init__(self, message: str, record_index: int | None = None, raw_record: str | None = None):
        super().__init__(message)
        self.message = message
        self.record_index = record_index
        self.raw_record = raw_record

    def __str__(self) -> str:
        if self.record_index is None:
            return self.message
        return f"record {self.record_index}: {self.message}"


class StructuralParseError(ClippingsParseError):
    """The record does not match the expected line layout."""

    pass


class NumericFormatError(ClippingsParseError):
    """A location or date component is non-numeric or out of range."""

    pass


class UnknownMonthError(ClippingsParseError):
    """A month name is absent from the month lookup table."""

    def __init__(self, month: str, record_index: int | None = None, raw_record: str | None = None):
        super().__init__(f"unknown month name: '{month}'", record_index, raw_record)
        self.month = month
