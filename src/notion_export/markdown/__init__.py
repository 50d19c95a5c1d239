# ABOUTME: Markdown conversion package.
# ABOUTME: Exports the converter, render rules and color styles.

from .converter import (
    USE_DEFAULT,
    MarkdownConverter,
    RenderContext,
    Rendered,
    UseDefault,
    find_page_title,
    get_page_title,
    get_rich_text,
    get_rich_text_html,
)
from .rules import callout_rule, paragraph_rule, register_rules, toggle_rule
from .styles import COLOR_STYLES, resolve_color_style

__all__ = [
    "USE_DEFAULT",
    "MarkdownConverter",
    "RenderContext",
    "Rendered",
    "UseDefault",
    "find_page_title",
    "get_page_title",
    "get_rich_text",
    "get_rich_text_html",
    "callout_rule",
    "paragraph_rule",
    "register_rules",
    "toggle_rule",
    "COLOR_STYLES",
    "resolve_color_style",
]
