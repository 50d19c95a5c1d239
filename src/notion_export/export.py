# ABOUTME: Exports one Notion page as a Markdown document.
# ABOUTME: Fetches the page, renders its blocks and derives title and filename.

import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

from .config import Settings
from .errors import EmptyContentError
from .markdown import MarkdownConverter, find_page_title, register_rules
from .notion import NotionClient, fetch_page

logger = logging.getLogger(__name__)


def sanitize_filename(name: str, max_length: int = 100) -> str:
    """Convert a string to a safe filename.

    Args:
        name: The original name.
        max_length: Maximum filename length.

    Returns:
        Sanitized filename.
    """
    # Replace problematic characters
    safe = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "-", name)
    safe = re.sub(r"\s+", " ", safe)
    safe = safe.strip(". ")

    if not safe:
        safe = "Untitled"

    if len(safe) > max_length:
        safe = safe[:max_length].rstrip(". ")

    return safe


@dataclass
class ExportedPage:
    """A rendered page ready to be served."""
    page_id: str
    title: str
    markdown: str

    @property
    def filename(self) -> str:
        return f"{sanitize_filename(self.title)}.md"

    def content_disposition(self) -> str:
        """Attachment header value with a percent-encoded filename."""
        encoded = quote(self.filename)
        return f"attachment; filename=\"{encoded}\"; filename*=UTF-8''{encoded}"


def build_converter(client: NotionClient, settings: Settings) -> MarkdownConverter:
    """Create a converter with the color-preserving rules installed."""
    return register_rules(MarkdownConverter(client, settings))


def export_page(client: NotionClient, page_id: str, settings: Settings | None = None) -> ExportedPage:
    """Fetch a page and render it as a single Markdown document.

    Raises:
        EmptyContentError: The page rendered to no text.
        UpstreamError: A Notion API call failed.
    """
    settings = settings or Settings()
    logger.info(f"Exporting page {page_id}")

    page = fetch_page(client, page_id)
    body = build_converter(client, settings).page_to_markdown(page_id)

    if not body.strip():
        raise EmptyContentError(
            "Page has no readable content. Make sure the page is shared with the integration."
        )

    title = find_page_title(page)
    if title is None:
        logger.debug(f"Page {page_id} has no title, using '{settings.fallback_title}'")
        title = " ".join(settings.fallback_title.split())

    logger.info(f"Exported page '{title}' ({page_id}), {len(body)} characters")
    return ExportedPage(page_id=page_id, title=title, markdown=f"# {title}\n\n{body}")
