"""Version command handler for the kindle2notion CLI."""

import sys

from ... import __version__
from ...notion import NotionAPIClient


def handle_version(_):
    """Show version information."""
    print(f"kindle2notion v{__version__}")
    print(f"Notion API version: {NotionAPIClient.NOTION_VERSION}")
    print(f"Python: {sys.version.split()[0]}")
