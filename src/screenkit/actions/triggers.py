"""
Event Triggers
Zero-argument callables bound into rendered nodes. The descriptor is kept
raw and only parsed when the trigger fires.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Optional, Union

from ..core import get_logger

if TYPE_CHECKING:
    from ..context import RenderContext
    from .engine import ActionEngine
    from .types import ChainOutcome

logger = get_logger(__name__)


class EventTrigger:
    """
    Bound event handler of one node.

    Calling it from inside a running event loop schedules the chain as a
    task and returns the task; calling it with no loop running drives the
    chain to completion and returns its outcome.
    """

    def __init__(
        self,
        engine: "ActionEngine",
        descriptor: Any,
        ctx: "RenderContext",
        event: str,
        source_id: Optional[str] = None,
    ):
        self.engine = engine
        self.descriptor = descriptor
        self.ctx = ctx
        self.event = event
        self.source_id = source_id

    async def fire(self) -> "ChainOutcome":
        """Run the bound chain and wait for it."""
        return await self.engine.execute(self.descriptor, self.ctx, event=self.event, source=self.source_id)

    def __call__(self) -> Union["asyncio.Task[ChainOutcome]", "ChainOutcome"]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.fire())
        return self.engine.spawn(loop, self.fire())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventTrigger):
            return NotImplemented
        return (
            self.engine is other.engine
            and self.ctx is other.ctx
            and self.event == other.event
            and self.source_id == other.source_id
            and self.descriptor == other.descriptor
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        action = self.descriptor.get("action") if isinstance(self.descriptor, dict) else None
        return f"EventTrigger({self.event}, action={action}, source={self.source_id})"


class FieldBinding:
    """
    ``onChanged`` of an input widget: records the new value in form state,
    then fires the author's own ``onChanged`` trigger when one was bound.
    """

    def __init__(self, ctx: "RenderContext", field_id: str, trigger: Optional[EventTrigger] = None):
        self.ctx = ctx
        self.field_id = field_id
        self.trigger = trigger

    def __call__(self, value: Any) -> Any:
        if not self.ctx.mounted:
            logger.debug("field_change_ignored", field=self.field_id, reason="unmounted")
            return None

        self.ctx.forms.set_field_value(self.field_id, value)
        if self.trigger is not None:
            return self.trigger()
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldBinding):
            return NotImplemented
        return self.ctx is other.ctx and self.field_id == other.field_id and self.trigger == other.trigger

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FieldBinding({self.field_id})"
