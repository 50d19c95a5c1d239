# ABOUTME: Maps Notion color identifiers to inline CSS declarations.
# ABOUTME: The table is built once at import time and never mutated.

from types import MappingProxyType

# Notion light-theme palette
_TEXT_COLORS = {
    "gray": "#787774",
    "brown": "#9F6B53",
    "orange": "#D9730D",
    "yellow": "#CB912F",
    "green": "#448361",
    "blue": "#337EA9",
    "purple": "#9065B0",
    "pink": "#C14C8A",
    "red": "#D44C47",
}

_BACKGROUND_COLORS = {
    "gray": "#F1F1EF",
    "brown": "#F4EEEE",
    "orange": "#FAEBDD",
    "yellow": "#FBF3DB",
    "green": "#EDF3EC",
    "blue": "#E7F3F8",
    "purple": "#F6F3F9",
    "pink": "#FAF1F5",
    "red": "#FDEBEC",
}


def _build_style_table() -> MappingProxyType:
    table = {}
    for name, hex_color in _TEXT_COLORS.items():
        table[name] = f"color: {hex_color}"
    for name, hex_color in _BACKGROUND_COLORS.items():
        table[f"{name}_background"] = (
            f"background-color: {hex_color}; padding: 2px 6px; border-radius: 4px"
        )
    return MappingProxyType(table)


COLOR_STYLES = _build_style_table()


def resolve_color_style(color: str | None) -> str:
    """Return the CSS declaration for a Notion color, or "" if there is none.

    "default" and unknown colors resolve to an empty declaration.
    """
    if not color or color == "default":
        return ""
    return COLOR_STYLES.get(color, "")
