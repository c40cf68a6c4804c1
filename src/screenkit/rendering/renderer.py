"""
Renderer
Turns a WidgetNode tree into a Node tree.

Rendering never raises: unknown types, malformed entries and failing
builders become placeholder nodes plus a diagnostic, and the tree keeps
its shape.
"""

import re
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

from ..actions.triggers import EventTrigger, FieldBinding
from ..core import DiagnosticKind, JSONParseError, get_logger, validate_json_depth
from ..models import MALFORMED_TYPE, WidgetNode
from ..monitoring import Timing, metrics_collector
from ..state import DEFAULT_FORM, field_dep, rules_from_properties
from .binding import ConditionError, StateReader, evaluate_condition, substitute
from .node import Node, placeholder_node
from .properties import PropertyParser
from .registry import WidgetRole
from .widgets.common import COLOR_KEYS, SIZE_KEYS, SPACING_KEYS

if TYPE_CHECKING:
    from ..context import RenderContext

logger = get_logger(__name__)

_EVENT_PROP_RE = re.compile(r"^on[A-Z]")


def normalize_event_name(name: str) -> str:
    """``tap`` -> ``onTap``, ``long_press`` -> ``onLongPress``, ``onPressed`` unchanged."""
    if _EVENT_PROP_RE.match(name):
        return name
    parts = [p for p in re.split(r"[_\-\s]+", name) if p]
    if not parts:
        return name
    return "on" + "".join(p[:1].upper() + p[1:] for p in parts)


def _is_descriptor(value: Any) -> bool:
    return isinstance(value, Mapping) and "action" in value


class _Pass:
    """State shared by one render pass."""

    __slots__ = ("ctx", "snapshot", "changed", "max_depth", "built", "placeholders", "reused")

    def __init__(self, ctx: "RenderContext", changed: Optional[frozenset[str]] = None):
        self.ctx = ctx
        # One snapshot per pass keeps every node consistent with the others
        self.snapshot = ctx.store.snapshot()
        self.changed = changed
        self.max_depth = ctx.settings.max_render_depth
        self.built = 0
        self.placeholders = 0
        self.reused = 0


class Renderer:
    """Stateless tree renderer; all per-screen state lives in the context."""

    def render(self, node: Union[WidgetNode, Mapping[str, Any]], ctx: "RenderContext") -> Node:
        """
        Render a whole tree.

        Args:
            node: Root widget (raw JSON is coerced)
            ctx: Render context of the screen

        Returns:
            Rendered root node
        """
        with metrics_collector.measure_duration() as timing:
            render_pass = _Pass(ctx)
            # Every recorded field value is read fresh below
            ctx.forms.take_changed()
            result = self._render(self._coerce(node, ctx), render_pass, 0, DEFAULT_FORM, None)
        self._finish("full", render_pass, timing)
        return result

    def rerender(self, previous: Node, ctx: "RenderContext", changed_keys: Iterable[str]) -> Node:
        """
        Re-render only subtrees that read one of ``changed_keys``, or an
        input whose field value was recorded since the last pass.

        Untouched subtrees are returned as-is; the result equals a full
        render against the same state.
        """
        if previous.source is None:
            logger.debug("rerender_without_source", type=previous.type)
            return previous

        with metrics_collector.measure_duration() as timing:
            changed = frozenset(changed_keys) | {field_dep(f) for f in ctx.forms.take_changed()}
            render_pass = _Pass(ctx, changed)
            if previous.deps.isdisjoint(changed):
                render_pass.reused += 1
                result = previous
            else:
                result = self._render(previous.source, render_pass, 0, DEFAULT_FORM, previous)
        self._finish("partial", render_pass, timing)
        return result

    def _coerce(self, node: Union[WidgetNode, Mapping[str, Any]], ctx: "RenderContext") -> WidgetNode:
        """Raw JSON to a WidgetNode; trees nested past the JSON depth limit become one malformed root."""
        if isinstance(node, WidgetNode):
            return node
        try:
            validate_json_depth(node, ctx.settings.max_json_depth)
            return WidgetNode.coerce(node)
        except (JSONParseError, RecursionError) as e:
            tag = node.get("type") if isinstance(node, Mapping) else None
            return WidgetNode(
                type=tag if isinstance(tag, str) and tag else MALFORMED_TYPE,
                malformed=f"widget tree rejected: {e}",
            )

    def _finish(self, mode: str, render_pass: _Pass, timing: Timing) -> None:
        metrics_collector.record_render(mode, timing.seconds)
        logger.debug(
            "render_finished",
            mode=mode,
            built=render_pass.built,
            placeholders=render_pass.placeholders,
            reused=render_pass.reused,
            duration_ms=timing.milliseconds,
        )

    # ========================================================================
    # Node rendering
    # ========================================================================

    def _render(
        self,
        source: WidgetNode,
        render_pass: _Pass,
        depth: int,
        form_id: str,
        previous: Optional[Node],
    ) -> Node:
        ctx = render_pass.ctx

        if depth >= render_pass.max_depth:
            ctx.diagnostics.report(
                DiagnosticKind.BUILD_FAILURE,
                "maximum render depth exceeded",
                source=source.type,
                depth=depth,
            )
            return self._placeholder(render_pass, source, "maximum render depth exceeded", (), frozenset())

        reader = StateReader(render_pass.snapshot)
        role = ctx.registry.role_of(source.type)

        raw_props = dict(source.properties)
        events = dict(source.events)
        for key in [k for k, v in raw_props.items() if _EVENT_PROP_RE.match(k) and _is_descriptor(v)]:
            events.setdefault(key, raw_props.pop(key))

        props = substitute(raw_props, reader)
        self._check_properties(props, source, ctx)

        child_form = form_id
        if role == WidgetRole.FORM:
            child_form = str(props.get("formId") or source.id or form_id)

        children = self._render_children(source, render_pass, depth, child_form, previous)
        child_deps = frozenset().union(*(child.deps for child in children))

        if source.malformed is not None:
            ctx.diagnostics.report(DiagnosticKind.BUILD_FAILURE, source.malformed, source=source.id)
            return self._placeholder(render_pass, source, source.malformed, children, child_deps)

        visible = self._evaluate_condition(source, reader, ctx)
        if visible is not None:
            props["visible"] = props.get("visible", True) is not False and visible

        self._bind_events(props, events, source, ctx)

        deps = frozenset(reader.deps) | child_deps
        if role == WidgetRole.INPUT:
            field_id = self._wire_input(props, source, form_id, ctx)
            # Validation errors arrive through the scratch key
            deps = deps | {ctx.settings.result_key}
            if field_id is not None:
                deps = deps | {field_dep(field_id)}

        builder = ctx.registry.resolve(source.type)
        if builder is None:
            detail = {"dropped_events": sorted(normalize_event_name(name) for name in events)} if events else {}
            ctx.diagnostics.report(
                DiagnosticKind.UNKNOWN_WIDGET_TYPE,
                f"unknown widget type: {source.type}",
                source=source.id,
                **detail,
            )
            return self._placeholder(render_pass, source, "unknown widget type", children, deps)

        try:
            built = builder(props, list(children), ctx)
        except Exception as e:
            ctx.diagnostics.report(
                DiagnosticKind.BUILD_FAILURE,
                f"builder for '{source.type}' failed: {e}",
                source=source.id,
                error_type=type(e).__name__,
            )
            return self._placeholder(render_pass, source, f"build failed: {e}", children, deps)

        if not isinstance(built, Node):
            ctx.diagnostics.report(
                DiagnosticKind.BUILD_FAILURE,
                f"builder for '{source.type}' returned {type(built).__name__}",
                source=source.id,
            )
            return self._placeholder(render_pass, source, "builder returned no node", children, deps)

        if visible is not None and built.props.get("visible") != props["visible"]:
            built = replace(built, props={**built.props, "visible": props["visible"]})

        render_pass.built += 1
        metrics_collector.record_node("built")
        return built.with_render_info(id=source.id, deps=deps, source=source)

    def _render_children(
        self,
        source: WidgetNode,
        render_pass: _Pass,
        depth: int,
        form_id: str,
        previous: Optional[Node],
    ) -> tuple[Node, ...]:
        reusable = (
            previous is not None
            and render_pass.changed is not None
            and len(previous.children) == len(source.children)
        )

        children = []
        for index, child in enumerate(source.children):
            prev_child = previous.children[index] if reusable else None
            if prev_child is not None and prev_child.source is not child:
                prev_child = None

            if prev_child is not None and prev_child.deps.isdisjoint(render_pass.changed):
                render_pass.reused += 1
                metrics_collector.record_node("reused")
                children.append(prev_child)
            else:
                children.append(self._render(child, render_pass, depth + 1, form_id, prev_child))

        return tuple(children)

    def _placeholder(
        self,
        render_pass: _Pass,
        source: WidgetNode,
        reason: str,
        children: tuple[Node, ...],
        deps: frozenset[str],
    ) -> Node:
        render_pass.placeholders += 1
        metrics_collector.record_node("placeholder")
        node = placeholder_node(source.type, reason, children)
        return node.with_render_info(id=source.id, deps=deps, source=source)

    # ========================================================================
    # Wiring
    # ========================================================================

    def _check_properties(self, props: dict[str, Any], source: WidgetNode, ctx: "RenderContext") -> None:
        """Report common properties whose values fall back to a default."""
        parser = PropertyParser(ctx.diagnostics)
        for key in SPACING_KEYS:
            if key in props:
                parser.spacing(props[key], name=key, source=source.id)
        for key in COLOR_KEYS:
            if key in props:
                parser.color(props[key], name=key, source=source.id)
        for key in SIZE_KEYS:
            if key in props:
                parser.double(props[key], name=key, source=source.id)
        if "alignment" in props:
            parser.alignment(props["alignment"], source=source.id)

    def _evaluate_condition(self, source: WidgetNode, reader: StateReader, ctx: "RenderContext") -> Optional[bool]:
        if source.condition is None:
            return None
        try:
            return evaluate_condition(source.condition, reader)
        except ConditionError as e:
            ctx.diagnostics.report(
                DiagnosticKind.UNRESOLVABLE_PROPERTY,
                str(e),
                source=source.id,
                property="condition",
            )
            return True

    def _bind_events(self, props: dict[str, Any], events: dict[str, Any], source: WidgetNode, ctx: "RenderContext") -> None:
        if not events:
            return
        if ctx.engine is None:
            logger.debug("events_unbound", type=source.type, reason="no engine")
            return

        for name, descriptor in events.items():
            key = normalize_event_name(name)
            props[key] = EventTrigger(ctx.engine, descriptor, ctx, key, source.id)

    def _wire_input(self, props: dict[str, Any], source: WidgetNode, form_id: str, ctx: "RenderContext") -> Optional[str]:
        """Bind an input to its field; returns the field id, or None when untracked."""
        field_id = props.get("fieldId") or source.id
        if not field_id:
            ctx.diagnostics.report(
                DiagnosticKind.UNRESOLVABLE_PROPERTY,
                f"{source.type} has neither 'fieldId' nor 'id'; its value is not tracked",
                property="fieldId",
            )
            return None

        field_id = str(field_id)
        state = ctx.forms.register_field(field_id, form_id, initial=props.get("value"), rules=rules_from_properties(props))

        props["fieldId"] = field_id
        props["formId"] = form_id
        props["value"] = state.value
        error = ctx.forms.errors().get(field_id)
        if error is not None and props.get("errorText") is None:
            props["errorText"] = error

        author_trigger = props.get("onChanged")
        props["onChanged"] = FieldBinding(
            ctx,
            field_id,
            author_trigger if isinstance(author_trigger, EventTrigger) else None,
        )
        return field_id


_default_renderer = Renderer()


def render(node: Union[WidgetNode, Mapping[str, Any]], ctx: "RenderContext") -> Node:
    """Render a tree with the shared renderer."""
    return _default_renderer.render(node, ctx)


def rerender(previous: Node, ctx: "RenderContext", changed_keys: Iterable[str]) -> Node:
    """Partial re-render with the shared renderer."""
    return _default_renderer.rerender(previous, ctx, changed_keys)
