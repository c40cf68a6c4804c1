"""Data models: widget trees, screen documents, action descriptors, UI primitives."""

from .widget import WidgetNode, ScreenDocument, MALFORMED_TYPE
from .actions import (
    ActionKind,
    BaseAction,
    ChainableAction,
    NavigateAction,
    LoginAction,
    SubmitFormAction,
    SetStateAction,
    ApiCallAction,
    LogoutAction,
    CustomAction,
    RejectedAction,
    ACTION_MODELS,
    parse_action,
)
from .effects import Session, AuthError, Response, NetworkError, ValidationResult
from .primitives import (
    Spacing,
    ZERO_SPACING,
    Color,
    Alignment,
    CornerRadius,
    Offset,
    Shape,
    MainAxisAlignment,
    CrossAxisAlignment,
    TextAlign,
    FontWeight,
)

__all__ = [
    "WidgetNode",
    "ScreenDocument",
    "MALFORMED_TYPE",
    "ActionKind",
    "BaseAction",
    "ChainableAction",
    "NavigateAction",
    "LoginAction",
    "SubmitFormAction",
    "SetStateAction",
    "ApiCallAction",
    "LogoutAction",
    "CustomAction",
    "RejectedAction",
    "ACTION_MODELS",
    "parse_action",
    "Spacing",
    "ZERO_SPACING",
    "Color",
    "Alignment",
    "CornerRadius",
    "Offset",
    "Shape",
    "MainAxisAlignment",
    "CrossAxisAlignment",
    "TextAlign",
    "FontWeight",
    "Session",
    "AuthError",
    "Response",
    "NetworkError",
    "ValidationResult",
]
