"""Unit tests for markdown.converter module."""

import pytest

from notion_export.config import Settings
from notion_export.errors import DepthExceededError
from notion_export.markdown.converter import (
    USE_DEFAULT,
    MarkdownConverter,
    Rendered,
    find_page_title,
    get_page_title,
    get_rich_text,
    get_rich_text_html,
)

from helpers import FakeNotionClient, make_block, make_page, make_run


class TestRichText:
    """Test inline rich text helpers."""

    def test_markdown_formatting(self):
        runs = [
            make_run("plain "),
            make_run("bold", bold=True),
            make_run(" "),
            make_run("code", code=True),
            make_run(" "),
            make_run("site", href="https://example.com"),
        ]

        assert get_rich_text(runs) == "plain **bold** `code` [site](https://example.com)"

    def test_markdown_combined_annotations(self):
        assert get_rich_text([make_run("x", bold=True, italic=True)]) == "***x***"

    def test_markdown_whitespace_stays_outside_markers(self):
        runs = [make_run("plain"), make_run(" bold ", bold=True), make_run("end")]

        assert get_rich_text(runs) == "plain **bold** end"

    def test_markdown_whitespace_only_run_is_not_wrapped(self):
        assert get_rich_text([make_run("a"), make_run("  ", italic=True), make_run("b")]) == "a  b"

    def test_markdown_whitespace_outside_link_text_markers(self):
        assert get_rich_text([make_run(" x", bold=True, href="https://e.com")]) == "[ **x**](https://e.com)"

    def test_html_formatting(self):
        runs = [
            make_run("a", bold=True),
            make_run("b", italic=True),
            make_run("c", code=True),
            make_run("d", href="https://example.com/?q=1&r=2"),
        ]

        result = get_rich_text_html(runs)

        assert result == (
            "<strong>a</strong><em>b</em><code>c</code>"
            '<a href="https://example.com/?q=1&amp;r=2">d</a>'
        )

    def test_html_escapes_text(self):
        assert get_rich_text_html([make_run("<b>&")]) == "&lt;b&gt;&amp;"

    def test_html_keeps_run_colors(self):
        result = get_rich_text_html([make_run("warn", color="red")])

        assert result == '<span style="color: #D44C47">warn</span>'

    def test_html_line_breaks(self):
        assert get_rich_text_html([make_run("one\ntwo")]) == "one<br>two"


class TestPageTitle:
    """Test title lookup."""

    def test_first_run_of_title_property(self):
        page = make_page("p1", "Project Notes")
        page["properties"]["Name"]["title"].append(make_run(" extra"))

        assert find_page_title(page) == "Project Notes"

    def test_missing_title_runs(self):
        assert find_page_title(make_page("p1")) is None

    def test_blank_title(self):
        assert find_page_title(make_page("p1", "   ")) is None

    def test_no_properties(self):
        assert find_page_title({"id": "p1"}) is None

    def test_title_line_breaks_collapse(self):
        assert find_page_title(make_page("p1", "Line one\nLine two")) == "Line one Line two"

    def test_title_whitespace_collapses(self):
        assert find_page_title(make_page("p1", "  Spaced \t out  ")) == "Spaced out"

    def test_get_page_title_fallback(self):
        assert get_page_title(make_page("p1")) == "Untitled"
        assert get_page_title(make_page("p1"), fallback="Draft") == "Draft"


class TestDefaultConversion:
    """Test conversion without render rules."""

    def test_paragraph(self, plain_converter):
        block = make_block("b1", "paragraph", "Hello world")

        assert plain_converter.blocks_to_markdown([block]) == "Hello world"

    def test_blocks_separated_by_blank_line(self, plain_converter):
        blocks = [
            make_block("b1", "heading_1", "Title"),
            make_block("b2", "paragraph", "Body"),
            make_block("b3", "divider"),
        ]

        assert plain_converter.blocks_to_markdown(blocks) == "# Title\n\nBody\n\n---"

    def test_consecutive_list_items_stay_tight(self, plain_converter):
        blocks = [
            make_block("b1", "bulleted_list_item", "one"),
            make_block("b2", "bulleted_list_item", "two"),
            make_block("b3", "paragraph", "after"),
        ]

        assert plain_converter.blocks_to_markdown(blocks) == "- one\n- two\n\nafter"

    def test_empty_blocks_are_dropped(self, plain_converter):
        blocks = [
            make_block("b1", "paragraph", "a"),
            make_block("b2", "paragraph"),
            make_block("b3", "paragraph", "b"),
        ]

        assert plain_converter.blocks_to_markdown(blocks) == "a\n\nb"

    def test_to_do(self, plain_converter):
        block = make_block("b1", "to_do", "done", checked=True)

        assert plain_converter.block_to_markdown(block) == "- [x] done"

    def test_code_uses_plain_text(self, plain_converter):
        block = make_block("b1", "code", "x = 1", language="python")

        assert plain_converter.block_to_markdown(block) == "```python\nx = 1\n```"

    def test_external_image(self, plain_converter):
        block = make_block("b1", "image", external={"url": "https://img.example/a.png"})

        assert plain_converter.block_to_markdown(block) == "![image](https://img.example/a.png)"

    def test_default_callout_is_a_quote(self, plain_converter):
        block = make_block("b1", "callout", "Note", icon={"type": "emoji", "emoji": "🔥"})

        assert plain_converter.block_to_markdown(block) == "> 🔥 Note"

    def test_unsupported_block(self, plain_converter):
        block = {"id": "b1", "type": "mystery", "mystery": {}}

        assert plain_converter.block_to_markdown(block) == "<!-- Unsupported block type: mystery -->"

    def test_list_children_are_fetched_and_indented(self, fake_client, plain_converter):
        fake_client.blocks["b1"] = [make_block("c1", "paragraph", "child")]
        block = make_block("b1", "bulleted_list_item", "parent", has_children=True)

        result = plain_converter.block_to_markdown(block)

        assert result == "- parent\n  child"
        assert fake_client.block_calls == ["b1"]

    def test_prefetched_children_are_not_fetched(self, fake_client, plain_converter):
        block = make_block("b1", "numbered_list_item", "parent", has_children=True)
        block["children"] = [make_block("c1", "numbered_list_item", "child")]

        result = plain_converter.block_to_markdown(block)

        assert result == "1. parent\n   1. child"
        assert fake_client.block_calls == []

    def test_child_page_contents_are_not_fetched(self, fake_client, plain_converter):
        block = {"id": "b1", "type": "child_page", "has_children": True, "child_page": {"title": "Sub"}}

        assert plain_converter.block_to_markdown(block) == "📄 Sub"
        assert fake_client.block_calls == []

    def test_table(self, fake_client, plain_converter):
        def row(row_id, *cells):
            return {"id": row_id, "type": "table_row", "table_row": {"cells": [[make_run(c)] for c in cells]}}

        fake_client.blocks["t1"] = [row("r1", "a", "b"), row("r2", "1", "2")]
        block = {"id": "t1", "type": "table", "has_children": True, "table": {"table_width": 2}}

        result = plain_converter.block_to_markdown(block)

        assert result == "| a | b |\n|---|---|\n| 1 | 2 |"

    def test_page_to_markdown_fetches_root(self, fake_client, plain_converter):
        fake_client.blocks["page"] = [make_block("b1", "paragraph", "Hi")]

        assert plain_converter.page_to_markdown("page") == "Hi"
        assert fake_client.block_calls == ["page"]


class TestRenderRules:
    """Test the rule extension point."""

    def test_rendered_result_replaces_default(self, plain_converter):
        plain_converter.register("paragraph", lambda block, ctx: Rendered("custom"))

        assert plain_converter.block_to_markdown(make_block("b1", "paragraph", "x")) == "custom"

    def test_use_default_falls_back(self, plain_converter):
        plain_converter.register("paragraph", lambda block, ctx: USE_DEFAULT)

        assert plain_converter.block_to_markdown(make_block("b1", "paragraph", "x")) == "x"

    def test_rendered_empty_string_is_not_a_decline(self, plain_converter):
        plain_converter.register("paragraph", lambda block, ctx: Rendered(""))

        assert plain_converter.block_to_markdown(make_block("b1", "paragraph", "x")) == ""

    def test_rule_receives_depth(self, fake_client, plain_converter):
        seen = []

        def rule(block, ctx):
            seen.append(ctx.depth)
            return USE_DEFAULT

        plain_converter.register("paragraph", rule)
        fake_client.blocks["b1"] = [make_block("c1", "paragraph", "child")]

        plain_converter.blocks_to_markdown([make_block("b1", "bulleted_list_item", "x", has_children=True)])

        assert seen == [1]


class TestDepthLimit:
    """Test the recursion guard."""

    def test_exceeding_max_depth_raises(self):
        client = FakeNotionClient(blocks={
            "root": [make_block("a", "bulleted_list_item", "a", has_children=True)],
            "a": [make_block("b", "bulleted_list_item", "b", has_children=True)],
            "b": [make_block("c", "bulleted_list_item", "c")],
        })
        converter = MarkdownConverter(client, Settings(max_depth=1))

        with pytest.raises(DepthExceededError):
            converter.page_to_markdown("root")

        assert client.block_calls == ["root", "a"]

    def test_within_max_depth(self):
        client = FakeNotionClient(blocks={
            "root": [make_block("a", "bulleted_list_item", "a", has_children=True)],
            "a": [make_block("b", "bulleted_list_item", "b")],
        })
        converter = MarkdownConverter(client, Settings(max_depth=1))

        assert converter.page_to_markdown("root") == "- a\n  - b"
