"""Widget resolution and rendering."""

from .node import Node, PLACEHOLDER_TYPE, placeholder_node
from .properties import (
    PropertyParser,
    parse_alignment,
    parse_bool,
    parse_border_radius,
    parse_color,
    parse_cross_axis_alignment,
    parse_double,
    parse_font_weight,
    parse_int,
    parse_main_axis_alignment,
    parse_offset,
    parse_shape,
    parse_spacing,
    parse_text_align,
)
from .registry import Builder, WidgetRegistry, WidgetRole, create_default_registry
from .builtins import register_builtin_widgets
from .binding import StateReader, substitute, evaluate_condition
from .renderer import Renderer, render, rerender, normalize_event_name

__all__ = [
    # Nodes
    "Node",
    "PLACEHOLDER_TYPE",
    "placeholder_node",
    # Properties
    "PropertyParser",
    "parse_alignment",
    "parse_bool",
    "parse_border_radius",
    "parse_color",
    "parse_cross_axis_alignment",
    "parse_double",
    "parse_font_weight",
    "parse_int",
    "parse_main_axis_alignment",
    "parse_offset",
    "parse_shape",
    "parse_spacing",
    "parse_text_align",
    # Registry
    "Builder",
    "WidgetRegistry",
    "WidgetRole",
    "create_default_registry",
    "register_builtin_widgets",
    # Rendering
    "StateReader",
    "substitute",
    "evaluate_condition",
    "Renderer",
    "render",
    "rerender",
    "normalize_event_name",
]
