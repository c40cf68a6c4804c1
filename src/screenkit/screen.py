"""
Screen View
Mount/unmount lifecycle tying store, renderer and engine together.
"""

import threading
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from .actions import ActionEngine, AuthBackend, CallbackRegistry, ChainOutcome, EventTrigger, FieldValidator, Navigator, NetworkBackend
from .context import RenderContext
from .core import (
    DiagnosticReporter,
    DocumentError,
    JSONParseError,
    LogContext,
    Settings,
    extract_json,
    get_logger,
    get_settings,
    new_screen_id,
    safe_json_dumps,
    validate_json_depth,
    validate_json_size,
)
from .models import ScreenDocument
from .monitoring import metrics_collector
from .rendering import Node, Renderer, WidgetRegistry, create_default_registry, normalize_event_name
from .state import FormStore, ViewStateStore

logger = get_logger(__name__)

UpdateListener = Callable[[Node], None]


def load_screen(source: Union[str, bytes, Mapping[str, Any]], settings: Optional[Settings] = None) -> ScreenDocument:
    """
    Decode a screen document.

    Accepts a full document (``{"id", "state", "rootWidget"}``) or a bare
    widget tree, as text (code fences and minor syntax damage tolerated)
    or already decoded.

    Raises:
        DocumentError: Oversized, too deep, undecodable or structurally invalid
    """
    settings = settings or get_settings()

    try:
        if isinstance(source, Mapping):
            data = dict(source)
        else:
            text = source.decode("utf-8") if isinstance(source, bytes) else source
            validate_json_size(text, settings.max_document_size, "screen document")
            data = extract_json(text)
        validate_json_depth(data, settings.max_json_depth)
    except (JSONParseError, UnicodeDecodeError) as e:
        raise DocumentError(str(e)) from e

    if "type" in data and "rootWidget" not in data and "root" not in data:
        data = {"rootWidget": data}

    try:
        document = ScreenDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(f"invalid screen document: {e.errors()[0].get('msg')}") from e

    logger.info("screen_loaded", screen=document.id, version=document.version)
    return document


class ScreenView:
    """
    One live screen.

    ``mount()`` builds the store from the document's initial state and
    renders; every state commit re-renders the affected subtrees and
    notifies ``on_update`` listeners. ``unmount()`` disposes the store, so
    chains still in flight turn into no-ops.
    """

    def __init__(
        self,
        document: ScreenDocument,
        registry: Optional[WidgetRegistry] = None,
        engine: Optional[ActionEngine] = None,
        *,
        navigator: Optional[Navigator] = None,
        auth: Optional[AuthBackend] = None,
        network: Optional[NetworkBackend] = None,
        validator: Optional[FieldValidator] = None,
        callbacks: Optional[CallbackRegistry] = None,
        settings: Optional[Settings] = None,
        renderer: Optional[Renderer] = None,
    ):
        self.document = document
        self.screen_id = new_screen_id()
        self.registry = registry or create_default_registry()
        self.engine = engine or ActionEngine()
        self.navigator = navigator
        self.auth = auth
        self.network = network
        self.validator = validator
        self.callbacks = callbacks or CallbackRegistry()
        self.settings = settings or get_settings()
        self.renderer = renderer or Renderer()
        self.diagnostics = DiagnosticReporter()

        self.ctx: Optional[RenderContext] = None
        self.tree: Optional[Node] = None
        self._listeners: List[UpdateListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._lock = threading.RLock()

    @property
    def mounted(self) -> bool:
        return self.ctx is not None and self.ctx.mounted

    @property
    def store(self) -> Optional[ViewStateStore]:
        return self.ctx.store if self.ctx is not None else None

    @property
    def forms(self) -> Optional[FormStore]:
        return self.ctx.forms if self.ctx is not None else None

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def mount(self) -> Node:
        """Create state, render, and start following state changes."""
        with self._lock:
            if self.mounted:
                return self.tree

            store = ViewStateStore(self.document.state)
            self.ctx = RenderContext(
                registry=self.registry,
                store=store,
                forms=FormStore(),
                engine=self.engine,
                navigator=self.navigator,
                auth=self.auth,
                network=self.network,
                validator=self.validator,
                callbacks=self.callbacks,
                diagnostics=self.diagnostics,
                settings=self.settings,
                screen_id=self.screen_id,
            )

            with LogContext(screen_id=self.screen_id):
                self.tree = self.renderer.render(self.document.root, self.ctx)
            self._unsubscribe = store.subscribe(None, self._on_state_change)

        metrics_collector.screen_mounted()
        logger.info("screen_mounted", screen=self.document.id, screen_id=self.screen_id)
        return self.tree

    def unmount(self) -> None:
        """Stop following state and dispose the store."""
        with self._lock:
            if not self.mounted:
                return
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            store = self.ctx.store

        # Store lock is taken after the screen lock is released; writers
        # notify this screen while holding the store lock.
        if unsubscribe is not None:
            unsubscribe()
        store.dispose()

        metrics_collector.screen_unmounted()
        logger.info("screen_unmounted", screen=self.document.id, screen_id=self.screen_id)

    def __enter__(self) -> "ScreenView":
        self.mount()
        return self

    def __exit__(self, *args: Any) -> None:
        self.unmount()

    # ========================================================================
    # Updates
    # ========================================================================

    def _on_state_change(self, snapshot: Mapping[str, Any], changed: frozenset[str]) -> None:
        self.refresh(changed)

    def refresh(self, changed: Optional[frozenset[str]] = None) -> Optional[Node]:
        """
        Re-render after a state change.

        Args:
            changed: Keys that changed; None forces a full render
        """
        with self._lock:
            if not self.mounted:
                return self.tree

            with LogContext(screen_id=self.screen_id):
                if changed is None or self.tree is None or not self.settings.partial_rerender:
                    self.tree = self.renderer.render(self.document.root, self.ctx)
                else:
                    self.tree = self.renderer.rerender(self.tree, self.ctx, changed)
            tree = self.tree
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(tree)
            except Exception as e:
                logger.error("update_listener_failed", error=str(e), exc_info=True)
        return tree

    def on_update(self, listener: UpdateListener) -> Callable[[], None]:
        """Call ``listener`` with every new tree; returns a remover."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ========================================================================
    # Interaction
    # ========================================================================

    def find(self, node_id: str) -> Optional[Node]:
        return self.tree.find(node_id) if self.tree is not None else None

    async def fire(self, node_id: str, event: str = "onTap") -> Optional[ChainOutcome]:
        """
        Fire the event bound on a node and wait for its chain.

        Returns:
            Chain outcome, or None when the node or event is not bound
        """
        node = self.find(node_id)
        trigger = node.props.get(normalize_event_name(event)) if node is not None else None
        if not isinstance(trigger, EventTrigger):
            logger.debug("event_not_bound", node=node_id, event_name=event)
            return None
        return await trigger.fire()

    def dump(self) -> str:
        """Rendered tree as JSON, for debugging and snapshots."""
        return safe_json_dumps(self.tree.to_dict() if self.tree is not None else None)
