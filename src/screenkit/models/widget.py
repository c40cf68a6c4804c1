"""Widget and screen document models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

# Type tag carried by entries that could not be read as a widget at all
MALFORMED_TYPE = "<malformed>"


class WidgetNode(BaseModel):
    """
    One JSON-described UI element.

    Accepted input shapes:
    - {"type": "Text", "properties": {...}, "children": [...], "events": {...}}
    - "props" for "properties" and "on_event" for "events"
    - a single "child" instead of "children"
    - an "events" map nested inside "properties"
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(..., description="Widget type tag, matched case-sensitively")
    id: str | None = Field(default=None, description="Unique identifier")
    properties: dict[str, Any] = Field(default_factory=dict)
    children: list["WidgetNode"] = Field(default_factory=list)
    events: dict[str, Any] = Field(default_factory=dict)
    condition: dict[str, Any] | None = Field(default=None)
    malformed: str | None = Field(default=None, description="Why the entry could not be read")

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)

        if "properties" not in data and isinstance(data.get("props"), dict):
            data["properties"] = data.pop("props")
        properties = data.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        properties = dict(properties)

        events: dict[str, Any] = {}
        nested_events = properties.pop("events", None)
        if isinstance(nested_events, dict):
            events.update(nested_events)
        for key in ("events", "on_event"):
            if isinstance(data.get(key), dict):
                events.update(data[key])
        data["events"] = events
        data["properties"] = properties
        data.pop("on_event", None)

        children = data.get("children")
        if children is None and "child" in data:
            children = [data.pop("child")]
        if children is None:
            children = []
        elif not isinstance(children, list):
            children = [children]
        data["children"] = [cls.coerce(child) for child in children]

        if data.get("id") is not None and not isinstance(data["id"], str):
            data["id"] = str(data["id"])
        if not isinstance(data.get("condition"), (dict, type(None))):
            data["condition"] = None

        return data

    @classmethod
    def coerce(cls, raw: Any) -> "WidgetNode":
        """
        Build a node from arbitrary decoded JSON without raising.

        Entries that are not widget objects become nodes with ``malformed``
        set, so the renderer can keep the tree shape and show a placeholder.
        """
        if isinstance(raw, WidgetNode):
            return raw
        if not isinstance(raw, dict):
            return cls(type=MALFORMED_TYPE, malformed=f"expected object, got {type(raw).__name__}")
        if not isinstance(raw.get("type"), str) or not raw["type"]:
            return cls(
                type=MALFORMED_TYPE,
                id=raw.get("id") if isinstance(raw.get("id"), str) else None,
                malformed="missing 'type'",
                children=raw.get("children") if isinstance(raw.get("children"), list) else [],
            )
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            return cls(type=MALFORMED_TYPE, malformed=str(e.errors()[0].get("msg", e)))

    def to_json(self) -> dict[str, Any]:
        """Serialize back to the canonical document form."""
        result: dict[str, Any] = {"type": self.type, "properties": dict(self.properties)}
        if self.id is not None:
            result["id"] = self.id
        if self.children:
            result["children"] = [child.to_json() for child in self.children]
        if self.events:
            result["events"] = dict(self.events)
        if self.condition is not None:
            result["condition"] = dict(self.condition)
        return result

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def has_events(self) -> bool:
        return bool(self.events)


class ScreenDocument(BaseModel):
    """A screen: metadata, initial view state and the root widget."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(default="screen")
    name: str = Field(default="")
    version: int = Field(default=1)
    state: dict[str, Any] = Field(default_factory=dict, description="Initial ViewState")
    root: WidgetNode = Field(..., alias="rootWidget")

    @model_validator(mode="before")
    @classmethod
    def _accept_root_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and "root" in data and "rootWidget" not in data:
            data = dict(data)
            data["rootWidget"] = data.pop("root")
        if isinstance(data, dict) and "rootWidget" in data:
            data = dict(data)
            data["rootWidget"] = WidgetNode.coerce(data["rootWidget"])
        return data


WidgetNode.model_rebuild()
