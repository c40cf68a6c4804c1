"""
Display Widgets
Text, media and decoration.
"""

from typing import TYPE_CHECKING

from ..properties import parse_color, parse_double, parse_font_weight, parse_int, parse_text_align
from .common import build, text_of

if TYPE_CHECKING:
    from ..registry import WidgetRegistry


def _text(properties, children, ctx):
    style = properties.get("style") if isinstance(properties.get("style"), dict) else {}
    return build(
        "Text",
        properties,
        children,
        text=text_of(properties, "text", "content", "data"),
        textAlign=parse_text_align(properties.get("textAlign")),
        fontSize=parse_double(style.get("fontSize", properties.get("fontSize"))),
        fontWeight=parse_font_weight(style.get("fontWeight", properties.get("fontWeight"))),
        color=parse_color(style.get("color", properties.get("color"))),
        maxLines=parse_int(properties.get("maxLines")),
    )


def _image(properties, children, ctx):
    return build("Image", properties, children, src=text_of(properties, "src", "url", "imageUrl"), fit=properties.get("fit", "cover"))


def _icon(properties, children, ctx):
    return build("Icon", properties, children, icon=text_of(properties, "icon", "name"), size=parse_double(properties.get("size")) or 24.0)


def _card(properties, children, ctx):
    return build("Card", properties, children, elevation=parse_double(properties.get("elevation")) or 1.0)


def _divider(properties, children, ctx):
    return build("Divider", properties, children, thickness=parse_double(properties.get("thickness")) or 1.0)


def _list_tile(properties, children, ctx):
    return build(
        "ListTile",
        properties,
        children,
        title=text_of(properties, "title"),
        subtitle=text_of(properties, "subtitle"),
    )


def _progress(type_tag: str):
    def builder(properties, children, ctx):
        value = parse_double(properties.get("value"))
        if value is not None:
            value = min(1.0, max(0.0, value))
        return build(type_tag, properties, children, value=value)

    return builder


def _badge(properties, children, ctx):
    return build("Badge", properties, children, label=text_of(properties, "label", "text", "count"))


def register_display_widgets(registry: "WidgetRegistry") -> None:
    """Register text, media and decoration widgets."""
    registry.register_many({
        "Text": _text,
        "Image": _image,
        "Icon": _icon,
        "Card": _card,
        "Divider": _divider,
        "ListTile": _list_tile,
        "LinearProgressIndicator": _progress("LinearProgressIndicator"),
        "CircularProgressIndicator": _progress("CircularProgressIndicator"),
        "Badge": _badge,
    })
