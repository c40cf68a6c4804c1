"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    safe_json_dumps,
    JSONParseError,
    validate_json_size,
    validate_json_depth,
)
from .errors import (
    ScreenKitError,
    DocumentError,
    Diagnostic,
    DiagnosticKind,
    DiagnosticReporter,
)
from .id import ChainID, StepID, ScreenID, new_chain_id, new_step_id, new_screen_id


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "JSONParseError",
    "validate_json_size",
    "validate_json_depth",
    # Errors
    "ScreenKitError",
    "DocumentError",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticReporter",
    # IDs
    "ChainID",
    "StepID",
    "ScreenID",
    "new_chain_id",
    "new_step_id",
    "new_screen_id",
]
