from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Clip(BaseModel):
    """Represents a single Kindle clipping (highlight, note, or bookmark)."""

    model_config = ConfigDict(frozen=True)

    book: str = Field(description="The title of the book, without the author group")
    author: str = Field(description="The author of the book")
    content: str = Field(default="", description="Content of the clipping, may be empty")
    date: datetime = Field(description="Timezone-aware date when the clipping was created")
    location: tuple[int, int] = Field(description="Start and end location markers reported by the Kindle")
    kind: str = Field(default="highlight", description="Type of clipping: 'highlight', 'note', or 'bookmark'")
    page: str | None = Field(default=None, description="Page number, when the device reports one")

    @field_validator("location")
    @classmethod
    def check_location(cls, value: tuple[int, int]) -> tuple[int, int]:
        """Reject negative or reversed location ranges."""
        start, end = value
        if start < 0 or end < 0:
            raise ValueError("location markers must be non-negative")
        if start > end:
            raise ValueError(f"location start {start} is after end {end}")
        return value


class BookClips(BaseModel):
    """A book identity plus its clips, in file order."""

    model_config = ConfigDict(frozen=True)

    book_name: str = Field(description="The title of the book")
    author: str = Field(description="The author of the book")
    clips: list[Clip] = Field(default_factory=list, description="Clips of this book, in file order")


class RejectedRecord(BaseModel):
    """A raw record that failed to parse."""

    model_config = ConfigDict(frozen=True)

    record_index: int = Field(description="1-based index of the record in the live part of the file")
    raw_record: str = Field(description="Raw text of the record")
    error: str = Field(description="Why the record was rejected")


class ParseResult(BaseModel):
    """Outcome of a record-scoped parse: the books that parsed plus the rejected records."""

    model_config = ConfigDict(frozen=True)

    books: list[BookClips] = Field(default_factory=list)
    rejected: list[RejectedRecord] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected
