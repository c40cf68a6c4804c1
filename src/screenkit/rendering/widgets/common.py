"""Shared helpers for built-in builders."""

from typing import Any

from ..node import Node
from ..properties import (
    parse_border_radius,
    parse_color,
    parse_double,
    parse_spacing,
)

# Properties every widget may carry, normalized the same way everywhere
SPACING_KEYS = ("padding", "margin")
COLOR_KEYS = ("color", "backgroundColor", "foregroundColor", "borderColor")
SIZE_KEYS = ("width", "height", "minWidth", "minHeight", "maxWidth", "maxHeight", "elevation", "flex")


def normalize_common(properties: dict[str, Any]) -> dict[str, Any]:
    """Return a copy with spacing, colors, sizes and radius parsed."""
    props = dict(properties)

    for key in SPACING_KEYS:
        if key in props:
            props[key] = parse_spacing(props[key])

    for key in COLOR_KEYS:
        if key in props:
            props[key] = parse_color(props[key])

    for key in SIZE_KEYS:
        if key in props:
            props[key] = parse_double(props[key])

    if "borderRadius" in props:
        props["borderRadius"] = parse_border_radius(props["borderRadius"])

    return props


def build(type_tag: str, properties: dict[str, Any], children: list[Node], **overrides: Any) -> Node:
    """Build a Node with common normalization plus builder-specific overrides."""
    props = normalize_common(properties)
    props.update(overrides)
    return Node(type=type_tag, props=props, children=tuple(children))


def text_of(properties: dict[str, Any], *keys: str, default: str = "") -> str:
    """First present key rendered as text; None becomes the default."""
    for key in keys:
        value = properties.get(key)
        if value is not None:
            return value if isinstance(value, str) else str(value)
    return default
