# ABOUTME: Render rules that keep Notion colors Markdown cannot express.
# ABOUTME: Paragraphs, toggles and callouts are emitted as styled raw HTML.

import html
import textwrap

from .converter import (
    USE_DEFAULT,
    MarkdownConverter,
    RenderContext,
    RenderResult,
    Rendered,
    get_rich_text_html,
)
from .styles import resolve_color_style

TOGGLE_BODY_STYLE = "padding-left: 1.5em"
CALLOUT_STYLE = "padding: 12px 16px; border-radius: 6px; display: flex; gap: 8px"


def _style_attr(style: str) -> str:
    return f' style="{style}"' if style else ""


def paragraph_rule(block: dict, context: RenderContext) -> RenderResult:
    """Render colored paragraphs; default-colored ones use the default conversion."""
    data = block.get("paragraph", {})
    color = data.get("color", "default")
    if color == "default":
        return USE_DEFAULT

    rich_text = data.get("rich_text", [])
    children = context.render_block_children(block)
    if not rich_text and not children:
        return Rendered("")

    result = ""
    if rich_text:
        text = get_rich_text_html(rich_text)
        result = f"<p{_style_attr(resolve_color_style(color))}>{text}</p>"
    if children:
        indented = textwrap.indent(children, "  ")
        result = f"{result}\n\n{indented}" if result else indented
    return Rendered(result)


def toggle_rule(block: dict, context: RenderContext) -> RenderResult:
    """Render a toggle as a <details> element.

    Children are rendered by running the whole pipeline on the toggle's id,
    and are only fetched when the block reports having any.
    """
    data = block.get("toggle", {})
    summary = get_rich_text_html(data.get("rich_text", []))
    style = resolve_color_style(data.get("color"))

    body = ""
    if block.get("has_children"):
        body = context.render_children(block["id"])

    return Rendered(
        "<details>\n"
        f"<summary{_style_attr(style)}>{summary}</summary>\n"
        f'<div style="{TOGGLE_BODY_STYLE}">\n\n'
        f"{body}\n\n"
        "</div>\n"
        "</details>"
    )


def _callout_icon(icon: dict | None, fallback: str) -> str:
    icon = icon or {}
    icon_type = icon.get("type")
    if icon_type == "emoji" and icon.get("emoji"):
        return icon["emoji"]
    if icon_type in ("external", "file"):
        url = (icon.get(icon_type) or {}).get("url")
        if url:
            return f'<img src="{html.escape(url, quote=True)}" alt="" width="20" height="20">'
    return fallback


def callout_rule(block: dict, context: RenderContext) -> RenderResult:
    """Render a callout as a colored box holding its icon and text."""
    settings = context.settings
    data = block.get("callout", {})

    icon = _callout_icon(data.get("icon"), settings.callout_icon)
    text = get_rich_text_html(data.get("rich_text", []))
    color = data.get("color") or "default"
    style = resolve_color_style(color)
    if not style:
        style = settings.callout_background
    elif not color.endswith("_background"):
        # Text colors keep the neutral box behind them
        style = f"{settings.callout_background}; {style}"

    # Nested blocks follow the text inside the box, as Markdown
    children = context.render_block_children(block)
    if children:
        text = f"{text}\n\n{children}\n\n"

    return Rendered(
        f'<div style="{style}; {CALLOUT_STYLE}">\n'
        f"<span>{icon}</span>\n"
        f"<div>{text}</div>\n"
        "</div>"
    )


def register_rules(converter: MarkdownConverter) -> MarkdownConverter:
    """Install the color-preserving rules on a converter."""
    converter.register("paragraph", paragraph_rule)
    converter.register("toggle", toggle_rule)
    converter.register("callout", callout_rule)
    return converter
