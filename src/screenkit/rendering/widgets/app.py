"""
App Widgets
Page scaffolding and form scopes.
"""

from typing import TYPE_CHECKING

from ..properties import parse_bool
from .common import build, text_of

if TYPE_CHECKING:
    from ..registry import WidgetRegistry


def _scaffold(properties, children, ctx):
    return build("Scaffold", properties, children, title=text_of(properties, "title"))


def _app_bar(properties, children, ctx):
    return build(
        "AppBar",
        properties,
        children,
        title=text_of(properties, "title"),
        centerTitle=parse_bool(properties.get("centerTitle")),
    )


def _safe_area(properties, children, ctx):
    return build("SafeArea", properties, children)


def _form(properties, children, ctx):
    return build("Form", properties, children, formId=text_of(properties, "formId", "id"))


def register_app_widgets(registry: "WidgetRegistry") -> None:
    """Register page structure widgets and the Form scope."""
    from ..registry import WidgetRole

    registry.register_many({
        "Scaffold": _scaffold,
        "AppBar": _app_bar,
        "SafeArea": _safe_area,
    })
    registry.register("Form", _form, role=WidgetRole.FORM)
