"""
Widget Registry
Lookup table from type tag to builder
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..core import get_logger
from .node import Node

if TYPE_CHECKING:
    from ..context import RenderContext

logger = get_logger(__name__)

Builder = Callable[[Dict[str, Any], List[Node], "RenderContext"], Node]
"""Pure function: (properties, rendered children, render context) -> Node"""


class WidgetRole(str, Enum):
    """How the renderer wires a widget beyond calling its builder."""

    DISPLAY = "display"
    INPUT = "input"    # holds a form field value
    FORM = "form"      # scopes input fields to a form id


class WidgetRegistry:
    """
    Central registry for widget builders.
    Built-in and host-supplied widgets share one namespace; the last
    registration for a tag wins.
    """

    def __init__(self):
        self.builders: Dict[str, Builder] = {}
        self.roles: Dict[str, WidgetRole] = {}

    def register(self, type_tag: str, builder: Builder, role: WidgetRole = WidgetRole.DISPLAY) -> None:
        """
        Register a builder for a type tag.

        Args:
            type_tag: Widget type, matched case-sensitively
            builder: Pure builder function
            role: Renderer wiring for the widget
        """
        if type_tag in self.builders:
            logger.debug("builder_replaced", type=type_tag)

        self.builders[type_tag] = builder
        self.roles[type_tag] = role

    def register_many(self, builders: Dict[str, Builder], role: WidgetRole = WidgetRole.DISPLAY) -> None:
        for type_tag, builder in builders.items():
            self.register(type_tag, builder, role)

    def unregister(self, type_tag: str) -> None:
        """Remove a builder"""
        if type_tag in self.builders:
            del self.builders[type_tag]
            del self.roles[type_tag]
            logger.debug("builder_unregistered", type=type_tag)

    def resolve(self, type_tag: str) -> Optional[Builder]:
        """Get builder by type tag; None when unregistered."""
        return self.builders.get(type_tag)

    def role_of(self, type_tag: str) -> WidgetRole:
        return self.roles.get(type_tag, WidgetRole.DISPLAY)

    def is_registered(self, type_tag: str) -> bool:
        return type_tag in self.builders

    def list_types(self, role: Optional[WidgetRole] = None) -> List[str]:
        """List registered type tags, optionally filtered by role."""
        tags = sorted(self.builders)
        if role:
            tags = [t for t in tags if self.roles[t] == role]
        return tags

    def get_stats(self) -> Dict[str, Any]:
        """Get registry statistics"""
        roles: Dict[str, int] = {}
        for role in self.roles.values():
            roles[role.value] = roles.get(role.value, 0) + 1

        return {
            "total_widgets": len(self.builders),
            "roles": roles,
        }

    def __contains__(self, type_tag: str) -> bool:
        return type_tag in self.builders

    def __len__(self) -> int:
        return len(self.builders)


def create_default_registry() -> WidgetRegistry:
    """Registry preloaded with the built-in widget set."""
    from .builtins import register_builtin_widgets

    registry = WidgetRegistry()
    register_builtin_widgets(registry)
    logger.info("registry_initialized", widgets=len(registry))
    return registry
