import re
from datetime import datetime

from pydantic import BaseModel, Field

# Notion rejects rich text longer than 2000 characters; leave room for the date mention
MAX_QUOTE_CHARS = 1800

SENTENCE_END_RE = re.compile(r"(?<=\. )")


class TextContent(BaseModel):
    content: str


class DateValue(BaseModel):
    start: datetime


class Mention(BaseModel):
    date: DateValue


class RichText(BaseModel):
    """A rich text span: either plain text or a date mention."""

    type: str = Field(default="text", description="'text' or 'mention'")
    text: TextContent | None = None
    mention: Mention | None = None

    @classmethod
    def plain(cls, content: str) -> "RichText":
        return cls(text=TextContent(content=content))

    @classmethod
    def date(cls, value: datetime) -> "RichText":
        return cls(type="mention", mention=Mention(date=DateValue(start=value)))


class Icon(BaseModel):
    type: str = "emoji"
    emoji: str


class Callout(BaseModel):
    rich_text: list[RichText]
    icon: Icon
    color: str = "default"


class Quote(BaseModel):
    rich_text: list[RichText]


class Block(BaseModel):
    """A child block of a Notion page."""

    object: str = "block"
    type: str = Field(description="Block type: 'callout', 'divider' or 'quote'")
    callout: Callout | None = None
    divider: dict | None = None
    quote: Quote | None = None

    @classmethod
    def new_callout(cls, content: str, emoji: str) -> "Block":
        return cls(type="callout", callout=Callout(rich_text=[RichText.plain(content)], icon=Icon(emoji=emoji)))

    @classmethod
    def new_divider(cls) -> "Block":
        return cls(type="divider", divider={})

    @classmethod
    def new_quote(cls, content: str, date: datetime | None = None) -> "Block":
        """Create a quote block, optionally followed by a line break and a date mention."""
        rich_text = [RichText.plain(content)]
        if date is not None:
            rich_text.append(RichText.plain("\n"))
            rich_text.append(RichText.date(date))
        return cls(type="quote", quote=Quote(rich_text=rich_text))


class PageParent(BaseModel):
    page_id: str


class PageProperties(BaseModel):
    title: list[RichText]


class NotionPage(BaseModel):
    """Request body for creating a page with its content blocks."""

    parent: PageParent
    icon: Icon = Field(default_factory=lambda: Icon(emoji="📖"))
    properties: PageProperties
    children: list[Block] = Field(default_factory=list)

    def to_dict(self, max_children: int | None = None) -> dict:
        """Convert the page to the JSON body expected by the Notion API.

        Args:
            max_children: Only include this many leading children, if given
        """
        data = self.model_dump(mode="json", exclude_none=True)
        if max_children is not None:
            data["children"] = data["children"][:max_children]
        return data


def split_quote_content(content: str, max_chars: int = MAX_QUOTE_CHARS) -> list[str]:
    """Split long clip content into chunks that fit in a single quote block.

    Splits happen after sentence ends ('. '). A single sentence longer than
    ``max_chars`` is cut at ``max_chars``.

    Args:
        content: Clip content
        max_chars: Maximum number of characters per chunk

    Returns:
        Non-empty list of chunks; [""] for empty content
    """
    chunks = []
    current = ""
    for phrase in SENTENCE_END_RE.split(content):
        while len(phrase) > max_chars:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(phrase[:max_chars])
            phrase = phrase[max_chars:]
        if current and len(current) + len(phrase) > max_chars:
            chunks.append(current)
            current = phrase
        else:
            current += phrase
    chunks.append(current)
    return chunks
