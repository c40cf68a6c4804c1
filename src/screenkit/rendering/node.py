"""Rendered node tree."""

from dataclasses import dataclass, field, replace
from typing import Any

PLACEHOLDER_TYPE = "Placeholder"


@dataclass(frozen=True)
class Node:
    """
    One rendered element.

    Builders return Nodes; host toolkits map them onto their own widget
    primitives. ``deps`` holds every ViewState key read by this node and its
    descendants, plus a ``@field:<id>`` key per bound input, which drives
    partial re-render.
    """

    type: str
    props: dict[str, Any] = field(default_factory=dict)
    children: tuple["Node", ...] = ()
    id: str | None = None
    original_type: str | None = None
    placeholder: bool = False
    deps: frozenset[str] = frozenset()
    source: Any = field(default=None, repr=False, compare=False)

    @property
    def visible(self) -> bool:
        return self.props.get("visible", True) is not False

    def with_render_info(self, *, id: str | None, deps: frozenset[str], source: Any) -> "Node":
        """Copy carrying renderer bookkeeping."""
        return replace(
            self,
            id=self.id if self.id is not None else id,
            original_type=self.original_type or (source.type if source is not None else None),
            deps=deps,
            source=source,
        )

    def find(self, node_id: str) -> "Node | None":
        """Depth-first lookup by id."""
        if self.id == node_id:
            return self
        for child in self.children:
            found = child.find(node_id)
            if found is not None:
                return found
        return None

    def walk(self):
        """Yield this node and all descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for logging and snapshots; callables become their names."""
        props = {k: (repr(v) if callable(v) else v) for k, v in self.props.items()}
        result: dict[str, Any] = {"type": self.type, "props": props}
        if self.id is not None:
            result["id"] = self.id
        if self.placeholder:
            result["placeholder"] = True
            result["original_type"] = self.original_type
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def placeholder_node(original_type: str, reason: str, children: tuple[Node, ...] = ()) -> Node:
    """Visible marker for a node that could not be built."""
    return Node(
        type=PLACEHOLDER_TYPE,
        props={"label": f"{original_type}: {reason}", "reason": reason},
        children=children,
        original_type=original_type,
        placeholder=True,
    )
