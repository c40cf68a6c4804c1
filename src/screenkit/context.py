"""
Render Context
Everything a render pass and an action chain need, passed explicitly.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .actions.callbacks import CallbackRegistry
from .actions.effects import AuthBackend, FieldValidator, Navigator, NetworkBackend
from .core import DiagnosticReporter, Settings, get_settings
from .rendering.registry import WidgetRegistry
from .state import FormStore, RuleValidator, ViewStateStore

if TYPE_CHECKING:
    from .actions.engine import ActionEngine


@dataclass
class RenderContext:
    """
    Per-screen wiring of registry, state and effect collaborators.

    Collaborators left as None make the actions that need them fail with an
    effect diagnostic instead of raising.
    """

    registry: WidgetRegistry
    store: ViewStateStore = field(default_factory=ViewStateStore)
    forms: FormStore = field(default_factory=FormStore)
    engine: Optional["ActionEngine"] = None
    navigator: Optional[Navigator] = None
    auth: Optional[AuthBackend] = None
    network: Optional[NetworkBackend] = None
    validator: Optional[FieldValidator] = None
    callbacks: CallbackRegistry = field(default_factory=CallbackRegistry)
    diagnostics: DiagnosticReporter = field(default_factory=DiagnosticReporter)
    settings: Settings = field(default_factory=get_settings)
    screen_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.validator is None:
            self.validator = RuleValidator(self.forms)

    @property
    def mounted(self) -> bool:
        """False once the owning screen disposed its store."""
        return not self.store.disposed
