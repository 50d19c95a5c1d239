"""Builders for Notion API payloads and a call-counting fake client."""

from notion_export.errors import UpstreamError


def make_run(text, bold=False, italic=False, code=False, strikethrough=False,
             underline=False, color="default", href=None):
    """Build a single rich_text text run."""
    return {
        "type": "text",
        "text": {"content": text, "link": {"url": href} if href else None},
        "plain_text": text,
        "annotations": {
            "bold": bold,
            "italic": italic,
            "code": code,
            "strikethrough": strikethrough,
            "underline": underline,
            "color": color,
        },
        "href": href,
    }


def make_block(block_id, block_type, text=None, color="default", has_children=False, **payload):
    """Build a block with a rich_text payload."""
    data = {"rich_text": [make_run(text)] if text else [], "color": color}
    data.update(payload)
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: data,
    }


def make_page(page_id, title=None):
    """Build a page whose title property holds one run."""
    runs = [make_run(title)] if title is not None else []
    return {
        "object": "page",
        "id": page_id,
        "properties": {
            "Tags": {"id": "a1", "type": "multi_select", "multi_select": []},
            "Name": {"id": "title", "type": "title", "title": runs},
        },
    }


class FakeNotionClient:
    """In-memory stand-in for NotionClient that records every call."""

    def __init__(self, pages=None, blocks=None):
        self.pages = pages or {}
        self.blocks = blocks or {}
        self.page_calls = []
        self.block_calls = []

    def get_page(self, page_id):
        self.page_calls.append(page_id)
        if page_id not in self.pages:
            raise UpstreamError("Failed to convert page", details=f"object_not_found: {page_id}")
        return self.pages[page_id]

    def get_blocks(self, block_id):
        self.block_calls.append(block_id)
        return self.blocks.get(block_id, [])

    @property
    def call_count(self):
        return len(self.page_calls) + len(self.block_calls)
