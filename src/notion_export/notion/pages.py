# ABOUTME: Page identifier handling and page metadata fetching.
# ABOUTME: Accepts raw IDs, dashed UUIDs and notion.so URLs.

import logging
import re

from .client import NotionClient

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(
    r"([0-9a-f]{8})-?([0-9a-f]{4})-?([0-9a-f]{4})-?([0-9a-f]{4})-?([0-9a-f]{12})",
    re.IGNORECASE,
)

_URL_ID_PATTERN = re.compile(
    r"(?<![0-9a-f])([0-9a-f]{8})-?([0-9a-f]{4})-?([0-9a-f]{4})-?([0-9a-f]{4})-?([0-9a-f]{12})$",
    re.IGNORECASE,
)


def parse_page_id(value: str | None) -> str | None:
    """Normalize a page ID or Notion URL to dashed UUID form.

    Returns None if no ID can be found.
    """
    if not value:
        return None
    value = value.strip()

    if "://" in value or "notion.so" in value or "notion.site" in value:
        # The ID ends the last path segment, before any query or fragment
        path = value.split("?", 1)[0].split("#", 1)[0].rstrip("/")
        segment = path.rsplit("/", 1)[-1]
        match = _URL_ID_PATTERN.search(segment)
        if not match:
            return None
    else:
        match = _ID_PATTERN.fullmatch(value)
        if not match:
            return None

    return "-".join(match.groups()).lower()


def fetch_page(client: NotionClient, page_id: str) -> dict:
    """Fetch page metadata (properties, icon, parent)."""
    logger.debug(f"Fetching page {page_id}")
    return client.get_page(page_id)
