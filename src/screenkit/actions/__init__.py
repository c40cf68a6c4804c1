"""Declarative action execution."""

from .callbacks import Callback, CallbackRegistry
from .effects import AuthBackend, FieldValidator, Navigator, NetworkBackend
from .engine import ActionEngine
from .handlers import DEFAULT_HANDLERS, Handler, write_result
from .triggers import EventTrigger, FieldBinding
from .types import ChainOutcome, StepListener, StepRecord, StepResult, StepStatus

__all__ = [
    # Engine
    "ActionEngine",
    "DEFAULT_HANDLERS",
    "Handler",
    "write_result",
    # Types
    "ChainOutcome",
    "StepListener",
    "StepRecord",
    "StepResult",
    "StepStatus",
    # Triggers
    "EventTrigger",
    "FieldBinding",
    # Effects
    "AuthBackend",
    "FieldValidator",
    "Navigator",
    "NetworkBackend",
    "Callback",
    "CallbackRegistry",
]
