# ABOUTME: Notion API integration package.
# ABOUTME: Exports the client and page helpers.

from .client import NotionClient
from .pages import fetch_page, parse_page_id

__all__ = [
    "NotionClient",
    "fetch_page",
    "parse_page_id",
]
