"""Publish Kindle 'My Clippings.txt' highlights to Notion."""

__version__ = "0.1.0"
