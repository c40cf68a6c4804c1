"""
Layout Widgets
Boxes, flex containers and scroll views.
"""

from typing import TYPE_CHECKING

from ..properties import (
    parse_alignment,
    parse_bool,
    parse_cross_axis_alignment,
    parse_double,
    parse_int,
    parse_main_axis_alignment,
    parse_shape,
)
from .common import build

if TYPE_CHECKING:
    from ..registry import WidgetRegistry


def _flex(direction: str):
    def builder(properties, children, ctx):
        return build(
            direction,
            properties,
            children,
            mainAxisAlignment=parse_main_axis_alignment(properties.get("mainAxisAlignment")),
            crossAxisAlignment=parse_cross_axis_alignment(properties.get("crossAxisAlignment")),
            spacing=parse_double(properties.get("spacing")) or 0.0,
        )

    return builder


def _container(properties, children, ctx):
    overrides = {"shape": parse_shape(properties.get("shape"))}
    if "alignment" in properties:
        overrides["alignment"] = parse_alignment(properties["alignment"])
    return build("Container", properties, children, **overrides)


def _center(properties, children, ctx):
    return build("Center", properties, children, alignment=parse_alignment("center"))


def _align(properties, children, ctx):
    return build("Align", properties, children, alignment=parse_alignment(properties.get("alignment")))


def _padding(properties, children, ctx):
    return build("Padding", properties, children)


def _sized_box(properties, children, ctx):
    return build("SizedBox", properties, children)


def _expanded(properties, children, ctx):
    return build("Expanded", properties, children, flex=parse_int(properties.get("flex")) or 1)


def _spacer(properties, children, ctx):
    return build("Spacer", properties, children, flex=parse_int(properties.get("flex")) or 1)


def _stack(properties, children, ctx):
    return build("Stack", properties, children, alignment=parse_alignment(properties.get("alignment", "topLeft")))


def _wrap(properties, children, ctx):
    return build(
        "Wrap",
        properties,
        children,
        spacing=parse_double(properties.get("spacing")) or 0.0,
        runSpacing=parse_double(properties.get("runSpacing")) or 0.0,
    )


def _scroll(type_tag: str):
    def builder(properties, children, ctx):
        return build(
            type_tag,
            properties,
            children,
            scrollDirection="horizontal" if properties.get("scrollDirection") == "horizontal" else "vertical",
            shrinkWrap=parse_bool(properties.get("shrinkWrap")),
        )

    return builder


def _grid_view(properties, children, ctx):
    return build(
        "GridView",
        properties,
        children,
        crossAxisCount=max(1, parse_int(properties.get("crossAxisCount")) or 2),
        mainAxisSpacing=parse_double(properties.get("mainAxisSpacing")) or 0.0,
        crossAxisSpacing=parse_double(properties.get("crossAxisSpacing")) or 0.0,
    )


def register_layout_widgets(registry: "WidgetRegistry") -> None:
    """Register flex, box and scrolling widgets."""
    registry.register_many({
        "Column": _flex("Column"),
        "Row": _flex("Row"),
        "Container": _container,
        "Center": _center,
        "Align": _align,
        "Padding": _padding,
        "SizedBox": _sized_box,
        "Expanded": _expanded,
        "Spacer": _spacer,
        "Stack": _stack,
        "Wrap": _wrap,
        "ListView": _scroll("ListView"),
        "SingleChildScrollView": _scroll("SingleChildScrollView"),
        "GridView": _grid_view,
    })
