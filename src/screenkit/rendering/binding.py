"""
State Binding
``${key}`` substitution against a ViewState snapshot, and ``condition``
evaluation. Every key read is recorded so the renderer can track deps.
"""

import re
from typing import Any, Mapping

from .properties import parse_double

EXPRESSION_RE = re.compile(r"\$\{\s*([^}\s]+)\s*\}")

_MISSING = object()


class StateReader:
    """Reads a snapshot by dot path and remembers the top-level keys touched."""

    def __init__(self, snapshot: Mapping[str, Any]):
        self.snapshot = snapshot
        self.deps: set[str] = set()

    def lookup(self, path: str) -> Any:
        """Value at ``path`` or ``None`` when any segment is missing."""
        head, *rest = path.split(".")
        self.deps.add(head)

        value: Any = self.snapshot.get(head, _MISSING)
        for segment in rest:
            if isinstance(value, Mapping):
                value = value.get(segment, _MISSING)
            elif isinstance(value, (list, tuple)) and segment.isdigit() and int(segment) < len(value):
                value = value[int(segment)]
            else:
                value = _MISSING
            if value is _MISSING:
                break

        return None if value is _MISSING else value

    def child(self) -> "StateReader":
        """Reader over the same snapshot with its own dep set."""
        return StateReader(self.snapshot)


def has_expression(value: Any) -> bool:
    return isinstance(value, str) and EXPRESSION_RE.search(value) is not None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def substitute(value: Any, reader: StateReader) -> Any:
    """
    Resolve expressions in ``value`` (recursively through maps and lists).

    A string that is exactly one expression yields the raw state value so
    numbers and maps keep their type. Missing keys resolve to "".
    """
    if isinstance(value, str):
        whole = EXPRESSION_RE.fullmatch(value)
        if whole:
            resolved = reader.lookup(whole.group(1))
            return "" if resolved is None else resolved
        if "${" not in value:
            return value
        return EXPRESSION_RE.sub(lambda m: _as_text(reader.lookup(m.group(1))), value)

    if isinstance(value, Mapping):
        return {k: substitute(v, reader) for k, v in value.items()}

    if isinstance(value, list):
        return [substitute(v, reader) for v in value]

    return value


# ============================================================================
# Conditions
# ============================================================================

def _equals(actual: Any, expected: Any) -> bool:
    if actual == expected:
        return True
    # "3" == 3 in documents authored by hand
    a, b = parse_double(actual), parse_double(expected)
    return a is not None and b is not None and a == b


def _compare(actual: Any, expected: Any, op) -> bool:
    a, b = parse_double(actual), parse_double(expected)
    if a is None or b is None:
        return False
    return op(a, b)


def _contains(actual: Any, expected: Any) -> bool:
    if isinstance(actual, str):
        return expected is not None and _as_text(expected) in actual
    if isinstance(actual, (list, tuple, set, frozenset, Mapping)):
        return expected in actual
    return False


CONDITIONS = {
    "equals": _equals,
    "notEquals": lambda a, b: not _equals(a, b),
    "greaterThan": lambda a, b: _compare(a, b, lambda x, y: x > y),
    "lessThan": lambda a, b: _compare(a, b, lambda x, y: x < y),
    "contains": _contains,
    "truthy": lambda a, _b: bool(a),
}


class ConditionError(ValueError):
    pass


def evaluate_condition(condition: Mapping[str, Any], reader: StateReader) -> bool:
    """
    Evaluate ``{key, type, value}`` against the snapshot.

    ``type`` defaults to ``equals`` when a value is given, else ``truthy``.

    Raises:
        ConditionError: Missing key or unknown condition type
    """
    key = condition.get("key")
    if not isinstance(key, str) or not key:
        raise ConditionError("condition requires a 'key'")

    kind = condition.get("type") or ("equals" if "value" in condition else "truthy")
    check = CONDITIONS.get(kind)
    if check is None:
        raise ConditionError(f"unknown condition type '{kind}'")

    actual = reader.lookup(key)
    expected = substitute(condition.get("value"), reader)
    return check(actual, expected)
