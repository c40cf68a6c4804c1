"""
Input Widgets
Buttons and form fields.

Field widgets receive ``value`` and ``onChanged`` from the renderer; the
builders only normalize what they are given.
"""

from typing import TYPE_CHECKING

from ..properties import parse_bool, parse_double, parse_int
from .common import build, text_of

if TYPE_CHECKING:
    from ..registry import WidgetRegistry


# ============================================================================
# Buttons
# ============================================================================

def _button(type_tag: str):
    def builder(properties, children, ctx):
        return build(
            type_tag,
            properties,
            children,
            label=text_of(properties, "label", "text"),
            enabled=parse_bool(properties.get("enabled"), default=True),
        )

    return builder


def _icon_button(properties, children, ctx):
    return build(
        "IconButton",
        properties,
        children,
        icon=text_of(properties, "icon"),
        tooltip=text_of(properties, "tooltip"),
        enabled=parse_bool(properties.get("enabled"), default=True),
    )


def _gesture(type_tag: str):
    def builder(properties, children, ctx):
        return build(type_tag, properties, children)

    return builder


# ============================================================================
# Fields
# ============================================================================

def _text_field(type_tag: str):
    def builder(properties, children, ctx):
        value = properties.get("value")
        return build(
            type_tag,
            properties,
            children,
            value="" if value is None else str(value),
            label=text_of(properties, "label", "labelText"),
            hint=text_of(properties, "hint", "hintText", "placeholder"),
            obscureText=parse_bool(properties.get("obscureText")),
            keyboardType=properties.get("keyboardType", "text"),
            maxLines=parse_int(properties.get("maxLines")) or 1,
            errorText=properties.get("errorText"),
        )

    return builder


def _toggle(type_tag: str):
    def builder(properties, children, ctx):
        return build(
            type_tag,
            properties,
            children,
            value=parse_bool(properties.get("value")),
            label=text_of(properties, "label"),
        )

    return builder


def _slider(properties, children, ctx):
    low = parse_double(properties.get("min"))
    high = parse_double(properties.get("max"))
    low = 0.0 if low is None else low
    high = 1.0 if high is None else high
    value = parse_double(properties.get("value"))
    value = low if value is None else min(high, max(low, value))
    return build("Slider", properties, children, min=low, max=high, value=value)


def _dropdown(properties, children, ctx):
    options = properties.get("options", properties.get("items", []))
    if not isinstance(options, list):
        options = []
    items = [
        {"value": o.get("value"), "label": str(o.get("label", o.get("value", "")))}
        if isinstance(o, dict) else {"value": o, "label": str(o)}
        for o in options
    ]
    return build("Dropdown", properties, children, options=items, value=properties.get("value"))


def register_input_widgets(registry: "WidgetRegistry") -> None:
    """Register buttons (display role) and value-holding fields (input role)."""
    from ..registry import WidgetRole

    registry.register_many({
        "ElevatedButton": _button("ElevatedButton"),
        "TextButton": _button("TextButton"),
        "OutlinedButton": _button("OutlinedButton"),
        "IconButton": _icon_button,
        "GestureDetector": _gesture("GestureDetector"),
        "InkWell": _gesture("InkWell"),
    })

    registry.register_many({
        "TextField": _text_field("TextField"),
        "TextFormField": _text_field("TextFormField"),
        "Checkbox": _toggle("Checkbox"),
        "Switch": _toggle("Switch"),
        "Slider": _slider,
        "Dropdown": _dropdown,
    }, role=WidgetRole.INPUT)
