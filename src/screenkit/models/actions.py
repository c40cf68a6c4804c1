"""Action descriptor models.

A descriptor is a closed, tagged variant discriminated by its ``action``
field. Chainable variants own their follow-up descriptors by value, so a
chain is a finite tree that serializes straight back to JSON.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    ValidationError,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel


class ActionKind(str, Enum):
    """The action vocabulary."""

    NAVIGATE = "navigate"
    LOGIN = "login"
    SUBMIT_FORM = "submitForm"
    SET_STATE = "setState"
    API_CALL = "apiCall"
    LOGOUT = "logout"
    CUSTOM = "custom"
    # Internal marker for descriptors that failed to parse
    REJECTED = "rejected"


class BaseAction(BaseModel):
    """Common base of all descriptor variants."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    kind: ClassVar[ActionKind]

    @model_serializer(mode="wrap")
    def serialize_descriptor(self, handler: Any) -> dict[str, Any]:
        # Nested branches carry their own discriminator
        return {"action": self.kind.value, **handler(self)}

    def to_json(self) -> dict[str, Any]:
        """Serialize to the camelCase descriptor form."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def depth(self) -> int:
        """Length of the longest chain starting at this descriptor."""
        branches = [b for b in self.branches() if b is not None]
        return 1 + max((b.depth() for b in branches), default=0)

    def branches(self) -> tuple["BaseAction | None", ...]:
        return ()


def _parse_branch(value: Any) -> Any:
    if value is None or isinstance(value, BaseAction):
        return value
    return parse_action(value)


class ChainableAction(BaseAction):
    """Variant with optional success and error follow-ups."""

    on_success: SerializeAsAny[BaseAction] | None = None
    on_error: SerializeAsAny[BaseAction] | None = None

    @field_validator("on_success", "on_error", mode="before")
    @classmethod
    def _parse_branches(cls, v: Any) -> Any:
        return _parse_branch(v)

    def branches(self) -> tuple[BaseAction | None, ...]:
        return (self.on_success, self.on_error)


class NavigateAction(BaseAction):
    """Move to another screen. Branches are not applicable and are dropped."""

    kind: ClassVar[ActionKind] = ActionKind.NAVIGATE

    target: str = Field(..., min_length=1)
    replace: bool = False
    arguments: dict[str, Any] | None = None


class LoginAction(ChainableAction):
    kind: ClassVar[ActionKind] = ActionKind.LOGIN

    email_field: str = Field(..., min_length=1)
    password_field: str = Field(..., min_length=1)


class SubmitFormAction(ChainableAction):
    kind: ClassVar[ActionKind] = ActionKind.SUBMIT_FORM

    form_id: str = Field(..., min_length=1)
    endpoint: str = Field(..., min_length=1)
    method: str = "POST"

    @field_validator("method")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class SetStateAction(ChainableAction):
    """Apply updates to ViewState. Branches are accepted but never run."""

    kind: ClassVar[ActionKind] = ActionKind.SET_STATE

    updates: dict[str, Any] = Field(default_factory=dict)


class ApiCallAction(ChainableAction):
    kind: ClassVar[ActionKind] = ActionKind.API_CALL

    method: str = "GET"
    endpoint: str = Field(..., min_length=1)
    body: Any = None
    query_params: dict[str, str] | None = None
    headers: dict[str, str] | None = None
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("method")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


class LogoutAction(BaseAction):
    """Clear the session and all view state, then run ``on_complete``."""

    kind: ClassVar[ActionKind] = ActionKind.LOGOUT

    on_complete: SerializeAsAny[BaseAction] | None = None

    @field_validator("on_complete", mode="before")
    @classmethod
    def _parse_on_complete(cls, v: Any) -> Any:
        return _parse_branch(v)

    def branches(self) -> tuple[BaseAction | None, ...]:
        return (self.on_complete,)


class CustomAction(ChainableAction):
    """Invoke a host-registered callback by name."""

    kind: ClassVar[ActionKind] = ActionKind.CUSTOM

    handler: str = Field(..., min_length=1)
    parameters: dict[str, Any] | None = None


class RejectedAction(BaseAction):
    """A descriptor that could not be parsed; executing it only reports."""

    kind: ClassVar[ActionKind] = ActionKind.REJECTED

    requested: str | None = None
    reason: str
    unknown: bool = False
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_serializer(mode="wrap")
    def serialize_descriptor(self, handler: Any) -> dict[str, Any]:
        # Round-trips exactly what the author wrote
        return dict(self.raw)


ACTION_MODELS: dict[str, type[BaseAction]] = {
    ActionKind.NAVIGATE.value: NavigateAction,
    ActionKind.LOGIN.value: LoginAction,
    ActionKind.SUBMIT_FORM.value: SubmitFormAction,
    ActionKind.SET_STATE.value: SetStateAction,
    ActionKind.API_CALL.value: ApiCallAction,
    ActionKind.LOGOUT.value: LogoutAction,
    ActionKind.CUSTOM.value: CustomAction,
}


def parse_action(raw: Any) -> BaseAction:
    """
    Parse a raw descriptor without raising.

    Args:
        raw: Decoded JSON (normally a mapping with an ``action`` key)

    Returns:
        The matching variant, or a RejectedAction describing why the
        descriptor could not be used
    """
    if isinstance(raw, BaseAction):
        return raw

    if not isinstance(raw, Mapping):
        return RejectedAction(reason=f"expected object, got {type(raw).__name__}")

    requested = raw.get("action")
    model = ACTION_MODELS.get(requested) if isinstance(requested, str) else None
    if model is None:
        return RejectedAction(
            requested=None if requested is None else str(requested),
            reason="missing 'action'" if requested is None else f"unknown action kind: {requested}",
            unknown=requested is not None,
            raw=dict(raw),
        )

    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        return RejectedAction(
            requested=requested,
            reason=f"{location}: {first.get('msg')}" if location else str(first.get("msg")),
            raw=dict(raw),
        )
