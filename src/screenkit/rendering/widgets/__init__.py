"""Built-in widget categories."""

from .app import register_app_widgets
from .display import register_display_widgets
from .inputs import register_input_widgets
from .layout import register_layout_widgets

__all__ = [
    "register_app_widgets",
    "register_display_widgets",
    "register_input_widgets",
    "register_layout_widgets",
]
