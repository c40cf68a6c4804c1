"""Per-screen state: observable view state and form input values."""

from .store import ViewStateStore, StateListener
from .forms import DEFAULT_FORM, FieldState, FormStore, RuleValidator, field_dep, rules_from_properties

__all__ = [
    "ViewStateStore",
    "StateListener",
    "DEFAULT_FORM",
    "FieldState",
    "FormStore",
    "RuleValidator",
    "field_dep",
    "rules_from_properties",
]
