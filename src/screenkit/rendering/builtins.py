"""
Built-in Widgets
Default builder set; hosts override any tag by registering after this.
"""

from typing import TYPE_CHECKING

from ..core import get_logger
from .widgets import (
    register_app_widgets,
    register_display_widgets,
    register_input_widgets,
    register_layout_widgets,
)

if TYPE_CHECKING:
    from .registry import WidgetRegistry

logger = get_logger(__name__)


def register_builtin_widgets(registry: "WidgetRegistry") -> None:
    """Register every built-in category."""
    register_layout_widgets(registry)
    register_display_widgets(registry)
    register_input_widgets(registry)
    register_app_widgets(registry)

    logger.debug("builtin_widgets_registered", **registry.get_stats())
