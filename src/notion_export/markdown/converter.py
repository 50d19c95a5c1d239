# ABOUTME: Converts Notion blocks to Markdown format.
# ABOUTME: Default conversion for all common block types, with per-type rule overrides.

import html
import logging
import textwrap
from dataclasses import dataclass
from typing import Callable, Protocol

from ..config import Settings
from ..errors import DepthExceededError
from .styles import resolve_color_style

logger = logging.getLogger(__name__)

# Block types whose children are rendered as part of the block
BLOCKS_WITH_CHILDREN = {
    "paragraph",
    "heading_1",
    "heading_2",
    "heading_3",
    "bulleted_list_item",
    "numbered_list_item",
    "toggle",
    "to_do",
    "quote",
    "callout",
    "synced_block",
    "template",
    "column",
    "column_list",
    "table",
}

# Consecutive items of these types stay in one tight list
LIST_TYPES = {"bulleted_list_item", "numbered_list_item", "to_do"}


class BlockSource(Protocol):
    def get_blocks(self, block_id: str) -> list[dict]: ...


@dataclass(frozen=True)
class Rendered:
    """A fragment produced by a render rule."""
    fragment: str


@dataclass(frozen=True)
class UseDefault:
    """Returned by a render rule to fall back to the default conversion."""


USE_DEFAULT = UseDefault()

RenderResult = Rendered | UseDefault


@dataclass(frozen=True)
class RenderContext:
    """What a render rule can see of the conversion in progress."""
    converter: "MarkdownConverter"
    depth: int

    @property
    def settings(self) -> Settings:
        return self.converter.settings

    def render_children(self, block_id: str) -> str:
        """Render everything below block_id as if it were a page root."""
        return self.converter.page_to_markdown(block_id, depth=self.depth + 1)

    def render_block_children(self, block: dict) -> str:
        """Render the nested blocks of a block the rule is handling."""
        return self.converter.children_markdown(block, self.depth)


RenderRule = Callable[[dict, RenderContext], RenderResult]


def get_rich_text(rich_text: list[dict]) -> str:
    """Extract plain text from Notion rich_text array with formatting."""
    result = []
    for segment in rich_text:
        text = segment.get("plain_text", "")
        annotations = segment.get("annotations", {})

        if segment.get("type") == "equation":
            text = f"${text}$"

        # Markers must hug the text, so surrounding whitespace stays outside
        stripped = text.strip()
        if stripped:
            leading = text[:len(text) - len(text.lstrip())]
            trailing = text[len(text.rstrip()):]
            text = stripped

            # Apply formatting
            if annotations.get("code"):
                text = f"`{text}`"
            if annotations.get("bold"):
                text = f"**{text}**"
            if annotations.get("italic"):
                text = f"*{text}*"
            if annotations.get("strikethrough"):
                text = f"~~{text}~~"
            text = f"{leading}{text}{trailing}"

        # Handle links
        if segment.get("href"):
            text = f"[{text}]({segment['href']})"

        result.append(text)

    return "".join(result)


def get_rich_text_html(rich_text: list[dict]) -> str:
    """Render a Notion rich_text array as inline HTML.

    Used inside raw HTML containers, where Markdown emphasis is not parsed.
    Run-level colors become styled spans.
    """
    result = []
    for segment in rich_text:
        text = html.escape(segment.get("plain_text", "")).replace("\n", "<br>")
        annotations = segment.get("annotations") or {}

        if annotations.get("code"):
            text = f"<code>{text}</code>"
        if annotations.get("bold"):
            text = f"<strong>{text}</strong>"
        if annotations.get("italic"):
            text = f"<em>{text}</em>"
        if annotations.get("strikethrough"):
            text = f"<s>{text}</s>"
        if annotations.get("underline"):
            text = f"<u>{text}</u>"

        style = resolve_color_style(annotations.get("color"))
        if style:
            text = f'<span style="{style}">{text}</span>'

        if segment.get("href"):
            text = f'<a href="{html.escape(segment["href"], quote=True)}">{text}</a>'

        result.append(text)

    return "".join(result)


def find_page_title(page: dict) -> str | None:
    """Return the plain text of the first run of the page's title property.

    Line breaks and runs of whitespace collapse to single spaces so the title
    fits on one heading line. Returns None when the page has no title
    property or it is empty.
    """
    props = page.get("properties")
    if not isinstance(props, dict):
        return None
    for prop in props.values():
        if not isinstance(prop, dict) or prop.get("type") != "title":
            continue
        runs = prop.get("title") or []
        if not runs or not isinstance(runs[0], dict):
            return None
        text = " ".join((runs[0].get("plain_text") or "").split())
        return text or None
    return None


def get_page_title(page: dict, fallback: str = "Untitled") -> str:
    """Extract title from page properties, or the fallback."""
    title = find_page_title(page)
    return title if title is not None else fallback


def _indent(text: str, prefix: str = "  ") -> str:
    return textwrap.indent(text, prefix)


class MarkdownConverter:
    """Converts block trees to Markdown, fetching children as needed.

    Render rules registered for a block type run before the default
    conversion and may hand the block back by returning USE_DEFAULT.
    """

    def __init__(self, client: BlockSource, settings: Settings | None = None):
        self._client = client
        self.settings = settings or Settings()
        self._rules: dict[str, RenderRule] = {}

    def register(self, block_type: str, rule: RenderRule) -> None:
        """Override rendering of one block type."""
        self._rules[block_type] = rule

    def fetch_blocks(self, block_id: str, depth: int) -> list[dict]:
        """Fetch the children of block_id, enforcing the depth ceiling."""
        if depth > self.settings.max_depth:
            raise DepthExceededError(
                f"Block tree nests deeper than {self.settings.max_depth} levels",
                details=f"block {block_id}",
            )
        blocks = self._client.get_blocks(block_id)
        logger.debug(f"Fetched {len(blocks)} blocks under {block_id} (depth {depth})")
        return blocks

    def page_to_markdown(self, block_id: str, depth: int = 0) -> str:
        """Fetch and convert all blocks under a page or block."""
        blocks = self.fetch_blocks(block_id, depth)
        return self.blocks_to_markdown(blocks, depth)

    def blocks_to_markdown(self, blocks: list[dict], depth: int = 0) -> str:
        """Convert a list of Notion blocks to Markdown.

        Args:
            blocks: List of Notion block dicts.
            depth: Nesting depth of the blocks.

        Returns:
            Markdown string.
        """
        result = ""
        previous_type = None
        for block in blocks:
            md = self.block_to_markdown(block, depth).rstrip("\n")
            if not md.strip():
                continue

            block_type = block.get("type")
            if result:
                tight = block_type == previous_type and block_type in LIST_TYPES
                result += "\n" if tight else "\n\n"
            result += md
            previous_type = block_type

        return result

    def block_to_markdown(self, block: dict, depth: int = 0) -> str:
        """Convert a single block, trying its render rule first."""
        rule = self._rules.get(block.get("type", ""))
        if rule is not None:
            result = rule(block, RenderContext(self, depth))
            if isinstance(result, Rendered):
                return result.fragment
        return self.default_block_to_markdown(block, depth)

    def get_children(self, block: dict, depth: int) -> list[dict]:
        """Children of a block: pre-fetched if present, otherwise fetched."""
        if "children" in block:
            return block["children"]
        if not block.get("has_children") or block.get("type") not in BLOCKS_WITH_CHILDREN:
            return []
        return self.fetch_blocks(block["id"], depth + 1)

    def children_markdown(self, block: dict, depth: int) -> str:
        return self.blocks_to_markdown(self.get_children(block, depth), depth + 1)

    def default_block_to_markdown(self, block: dict, depth: int = 0) -> str:
        """Convert a single Notion block to Markdown without render rules.

        Args:
            block: Notion block dict.
            depth: Nesting depth of the block.

        Returns:
            Markdown string.
        """
        block_type = block.get("type", "")
        block_data = block.get(block_type, {})

        # Paragraph
        if block_type == "paragraph":
            text = get_rich_text(block_data.get("rich_text", []))
            children = self.children_markdown(block, depth)
            if children:
                return f"{text}\n\n{_indent(children)}" if text else _indent(children)
            return text

        # Headings
        if block_type in ("heading_1", "heading_2", "heading_3"):
            level = int(block_type[-1])
            text = get_rich_text(block_data.get("rich_text", []))
            result = f"{'#' * level} {text}"
            children = self.children_markdown(block, depth)
            if children:
                result += f"\n\n{children}"
            return result

        # Lists
        if block_type in LIST_TYPES:
            text = get_rich_text(block_data.get("rich_text", []))
            if block_type == "bulleted_list_item":
                marker = "-"
            elif block_type == "numbered_list_item":
                marker = "1."
            else:
                checkbox = "[x]" if block_data.get("checked", False) else "[ ]"
                marker = f"- {checkbox}"
            result = f"{marker} {text}"
            children = self.children_markdown(block, depth)
            if children:
                result += "\n" + _indent(children, " " * (len(marker) + 1))
            return result

        # Toggle
        if block_type == "toggle":
            text = get_rich_text(block_data.get("rich_text", []))
            result = f"<details>\n<summary>{text}</summary>\n\n"
            children = self.children_markdown(block, depth)
            if children:
                result += f"{children}\n\n"
            return result + "</details>"

        # Quote
        if block_type == "quote":
            text = get_rich_text(block_data.get("rich_text", []))
            children = self.children_markdown(block, depth)
            if children:
                text = f"{text}\n\n{children}"
            return "\n".join(f"> {line}" if line else ">" for line in text.split("\n"))

        # Callout
        if block_type == "callout":
            text = get_rich_text(block_data.get("rich_text", []))
            icon = block_data.get("icon") or {}
            emoji = icon.get("emoji", self.settings.callout_icon) if icon.get("type") == "emoji" else self.settings.callout_icon
            result = f"> {emoji} {text}"
            children = self.children_markdown(block, depth)
            if children:
                result += "\n>\n" + "\n".join(f"> {line}" if line else ">" for line in children.split("\n"))
            return result

        # Code
        if block_type == "code":
            text = "".join(s.get("plain_text", "") for s in block_data.get("rich_text", []))
            language = block_data.get("language", "")
            if language == "plain text":
                language = ""
            return f"```{language}\n{text}\n```"

        # Divider
        if block_type == "divider":
            return "---"

        # Image
        if block_type == "image":
            caption = get_rich_text(block_data.get("caption", []))
            alt_text = caption or "image"
            url = _file_url(block_data)
            return f"![{alt_text}]({url or 'missing-image'})"

        # File/PDF/Video/Audio
        if block_type in ("file", "pdf", "video", "audio"):
            caption = get_rich_text(block_data.get("caption", []))
            name = caption or block_data.get("name") or block_type
            url = _file_url(block_data)
            return f"[{name}]({url or 'missing-file'})"

        # Bookmark
        if block_type == "bookmark":
            url = block_data.get("url", "")
            caption = get_rich_text(block_data.get("caption", []))
            title = caption or url
            return f"[{title}]({url})"

        # Table
        if block_type == "table":
            rows = self.get_children(block, depth)
            if not rows:
                return ""

            result = []
            for row in rows:
                if row.get("type") != "table_row":
                    continue
                cells = row.get("table_row", {}).get("cells", [])
                cell_texts = [get_rich_text(cell).replace("|", "\\|") for cell in cells]
                result.append("| " + " | ".join(cell_texts) + " |")
                if len(result) == 1:
                    # Add header separator
                    result.append("|" + "|".join(["---"] * len(cells)) + "|")

            return "\n".join(result)

        # Containers
        if block_type in ("column_list", "column", "synced_block", "template"):
            return self.children_markdown(block, depth)

        # Equation
        if block_type == "equation":
            expression = block_data.get("expression", "")
            return f"$$\n{expression}\n$$"

        # Link preview / embed
        if block_type in ("link_preview", "embed"):
            url = block_data.get("url", "")
            return f"[{url}]({url})"

        # Child page (just note it exists)
        if block_type == "child_page":
            title = block_data.get("title") or "Untitled"
            return f"📄 {title}"

        # Child database
        if block_type == "child_database":
            title = block_data.get("title") or "Untitled Database"
            return f"🗃️ {title}"

        # Breadcrumb / table of contents have no static rendering
        if block_type in ("breadcrumb", "table_of_contents"):
            return ""

        # Unknown block type
        logger.debug(f"Unsupported block type: {block_type}")
        return f"<!-- Unsupported block type: {block_type} -->"


def _file_url(block_data: dict) -> str:
    """URL of a Notion-hosted or external file payload."""
    if "file" in block_data:
        return block_data["file"].get("url", "")
    if "external" in block_data:
        return block_data["external"].get("url", "")
    return ""
