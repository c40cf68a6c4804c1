"""
Form Input State
Field values of rendered inputs, grouped by form, plus the default
rule-based validator.
"""

import re
import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from ..core import get_logger
from ..models import ValidationResult

logger = get_logger(__name__)

# Form id for inputs rendered outside any Form widget
DEFAULT_FORM = "_default"

# Prefix of the render dependency an input node holds on its own field
FIELD_DEP_PREFIX = "@field:"

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class FieldState:
    field_id: str
    form_id: str
    value: Any = None
    rules: list[dict[str, Any]] = field(default_factory=list)


def field_dep(field_id: str) -> str:
    """Dependency key of an input node bound to ``field_id``."""
    return FIELD_DEP_PREFIX + field_id


class FormStore:
    """
    Input values for one mounted screen, keyed by field id.

    Field ids are unique per screen; each field remembers the form that
    enclosed it when it was rendered.
    """

    def __init__(self):
        self._fields: dict[str, FieldState] = {}
        self._errors: dict[str, str] = {}
        self._changed: set[str] = set()
        self._lock = threading.Lock()

    def register_field(
        self,
        field_id: str,
        form_id: str = DEFAULT_FORM,
        initial: Any = None,
        rules: Optional[list[dict[str, Any]]] = None,
    ) -> FieldState:
        """
        Register (or refresh) a field. Re-rendering keeps the value already
        typed by the user; ``initial`` only seeds new fields.
        """
        with self._lock:
            existing = self._fields.get(field_id)
            if existing is None:
                existing = FieldState(field_id=field_id, form_id=form_id, value=initial)
                self._fields[field_id] = existing
            existing.form_id = form_id
            existing.rules = list(rules or [])
            return existing

    def get_field_value(self, field_id: str) -> Any:
        state = self._fields.get(field_id)
        return state.value if state is not None else None

    def set_field_value(self, field_id: str, value: Any) -> None:
        """Record a value; unknown fields are registered under the default form."""
        with self._lock:
            state = self._fields.get(field_id)
            if state is None:
                state = FieldState(field_id=field_id, form_id=DEFAULT_FORM)
                self._fields[field_id] = state
            state.value = value
            self._errors.pop(field_id, None)
            self._changed.add(field_id)

    def get_field(self, field_id: str) -> Optional[FieldState]:
        return self._fields.get(field_id)

    def fields(self, form_id: str) -> list[str]:
        """Field ids of one form, in registration order."""
        return [f.field_id for f in list(self._fields.values()) if f.form_id == form_id]

    def values(self, form_id: str) -> dict[str, Any]:
        return {f.field_id: f.value for f in list(self._fields.values()) if f.form_id == form_id}

    def set_errors(self, errors: dict[str, str]) -> None:
        with self._lock:
            self._errors.update(errors)
            self._changed.update(errors)

    def errors(self, form_id: Optional[str] = None) -> dict[str, str]:
        """Last validation errors, optionally limited to one form."""
        if form_id is None:
            return dict(self._errors)
        ids = set(self.fields(form_id))
        return {k: v for k, v in self._errors.items() if k in ids}

    def reset(self) -> None:
        """Forget every value and error; registrations stay."""
        with self._lock:
            for state in self._fields.values():
                state.value = None
            self._errors.clear()
            self._changed.update(self._fields)

    def clear(self) -> None:
        with self._lock:
            self._fields.clear()
            self._errors.clear()
            self._changed.clear()

    def take_changed(self) -> set[str]:
        """Field ids written since the last call; the record is emptied."""
        with self._lock:
            changed, self._changed = self._changed, set()
            return changed

    def __contains__(self, field_id: str) -> bool:
        return field_id in self._fields

    def __len__(self) -> int:
        return len(self._fields)


# ============================================================================
# Rule-based validation
# ============================================================================

def rules_from_properties(properties: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Collect validation rules declared on an input widget.

    Accepted forms::

        {"required": true}
        {"validators": [{"type": "minLength", "value": 8, "message": "..."}]}
        {"validators": {"required": true, "email": true, "maxLength": 40}}
    """
    rules: list[dict[str, Any]] = []

    if properties.get("required") is True:
        rules.append({"type": "required"})

    declared = properties.get("validators")
    if isinstance(declared, dict):
        for rule_type, value in declared.items():
            if value is not False and value is not None:
                rules.append({"type": rule_type, "value": value})
    elif isinstance(declared, list):
        for entry in declared:
            if isinstance(entry, str):
                rules.append({"type": entry})
            elif isinstance(entry, dict) and isinstance(entry.get("type"), str):
                rules.append(dict(entry))

    return rules


def _is_empty(value: Any) -> bool:
    return value is None or value is False or (isinstance(value, (str, list, dict)) and len(value) == 0)


def _length(value: Any) -> int:
    return len(value) if isinstance(value, (str, list)) else len(str(value))


def _check(rule: dict[str, Any], value: Any) -> Optional[str]:
    """Error message when ``value`` breaks ``rule``, else None."""
    rule_type = rule.get("type")
    message = rule.get("message")
    arg = rule.get("value")

    if rule_type == "required":
        return (message or "This field is required") if _is_empty(value) else None

    # Remaining rules only apply to non-empty values
    if _is_empty(value):
        return None

    if rule_type == "email":
        return None if EMAIL_RE.match(str(value)) else (message or "Enter a valid email address")

    if rule_type in ("minLength", "maxLength"):
        try:
            limit = int(arg)
        except (TypeError, ValueError):
            logger.warning("invalid_validation_limit", type=rule_type, value=arg)
            return None

    if rule_type == "minLength":
        return None if _length(value) >= limit else (message or f"Must be at least {limit} characters")

    if rule_type == "maxLength":
        return None if _length(value) <= limit else (message or f"Must be at most {limit} characters")

    if rule_type == "pattern":
        try:
            matched = re.fullmatch(str(arg), str(value)) is not None
        except re.error:
            logger.warning("invalid_validation_pattern", pattern=arg)
            return None
        return None if matched else (message or "Invalid format")

    logger.debug("unknown_validation_rule", type=rule_type)
    return None


class RuleValidator:
    """Default FieldValidator over the rules declared on input widgets."""

    def __init__(self, forms: FormStore):
        self.forms = forms

    def validate(self, field_id: str) -> ValidationResult:
        state = self.forms.get_field(field_id)
        if state is None:
            return ValidationResult.ok()

        for rule in state.rules:
            error = _check(rule, state.value)
            if error is not None:
                return ValidationResult.failed(field_id, error)

        return ValidationResult.ok()
