from .client import NotionAPIClient
from .models import Block, NotionPage, split_quote_content

__all__ = ["Block", "NotionAPIClient", "NotionPage", "split_quote_content"]
