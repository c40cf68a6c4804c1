"""
screenkit
Render JSON-described screens and run their declarative actions.
"""

from .core import Settings, configure_logging, get_settings, DiagnosticKind, DocumentError
from .models import ScreenDocument, WidgetNode, parse_action
from .rendering import Node, Renderer, WidgetRegistry, WidgetRole, create_default_registry, render, rerender
from .state import FormStore, RuleValidator, ViewStateStore
from .actions import ActionEngine, CallbackRegistry, ChainOutcome, EventTrigger, StepStatus
from .context import RenderContext
from .screen import ScreenView, load_screen
from .container import CoreModule, ScreenFactory, create_container

__version__ = "0.1.0"

__all__ = [
    # Core
    "Settings",
    "configure_logging",
    "get_settings",
    "DiagnosticKind",
    "DocumentError",
    # Models
    "ScreenDocument",
    "WidgetNode",
    "parse_action",
    # Rendering
    "Node",
    "Renderer",
    "WidgetRegistry",
    "WidgetRole",
    "create_default_registry",
    "render",
    "rerender",
    # State
    "FormStore",
    "RuleValidator",
    "ViewStateStore",
    # Actions
    "ActionEngine",
    "CallbackRegistry",
    "ChainOutcome",
    "EventTrigger",
    "StepStatus",
    # Screens
    "RenderContext",
    "ScreenView",
    "load_screen",
    # Container
    "CoreModule",
    "ScreenFactory",
    "create_container",
]
