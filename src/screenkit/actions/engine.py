"""
Action Engine
Runs a descriptor chain step by step against a screen's state and effects.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Coroutine, Dict, List, Optional, Set, Tuple

from ..core import (
    ChainID,
    DiagnosticKind,
    LogContext,
    get_logger,
    new_chain_id,
    new_step_id,
)
from ..models import BaseAction, RejectedAction, parse_action
from ..monitoring import metrics_collector
from .handlers import DEFAULT_HANDLERS, Handler, write_result
from .types import ChainOutcome, StepListener, StepRecord, StepResult, StepStatus

if TYPE_CHECKING:
    from ..context import RenderContext

logger = get_logger(__name__)


class ActionEngine:
    """
    Executes action chains.

    Each step moves Pending -> Executing -> Succeeded/Failed and then hands
    over to at most one follow-up descriptor. Steps of one chain run in
    sequence; separate chains interleave on the event loop.
    """

    def __init__(self, handlers: Optional[Dict[str, Handler]] = None):
        self.handlers: Dict[str, Handler] = dict(DEFAULT_HANDLERS if handlers is None else handlers)
        self.listeners: List[StepListener] = []
        self._tasks: Set["asyncio.Task[Any]"] = set()

    # ========================================================================
    # Configuration
    # ========================================================================

    def register_handler(self, kind: str, handler: Handler) -> None:
        """Replace the handler of one action kind."""
        self.handlers[kind] = handler

    def add_listener(self, listener: StepListener) -> Callable[[], None]:
        """Observe every step transition; returns a remover."""
        self.listeners.append(listener)

        def _remove() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return _remove

    # ========================================================================
    # Execution
    # ========================================================================

    async def execute(
        self,
        descriptor: Any,
        ctx: "RenderContext",
        *,
        event: Optional[str] = None,
        source: Optional[str] = None,
    ) -> ChainOutcome:
        """
        Run a chain to completion.

        Args:
            descriptor: Raw descriptor (parsed here) or a parsed action
            ctx: Render context of the owning screen
            event: Event name that fired the chain, for logs
            source: Id of the node that owns the event

        Returns:
            Terminal record of every step, in execution order
        """
        chain_id = new_chain_id()
        outcome = ChainOutcome(chain_id=chain_id)
        action: Optional[BaseAction] = parse_action(descriptor)

        with LogContext(chain_id=chain_id):
            logger.debug("chain_started", event_name=event, source=source, action=action.kind.value)

            while action is not None:
                record, action = await self._run_step(action, ctx, chain_id, len(outcome.steps))
                outcome.steps.append(record)

            logger.debug(
                "chain_finished",
                steps=len(outcome.steps),
                succeeded=outcome.succeeded,
            )

        return outcome

    async def _run_step(
        self,
        action: BaseAction,
        ctx: "RenderContext",
        chain_id: ChainID,
        index: int,
    ) -> Tuple[StepRecord, Optional[BaseAction]]:
        kind = action.kind.value
        record = StepRecord(step_id=new_step_id(), chain_id=chain_id, kind=kind, index=index)
        self._notify(record)

        if not ctx.mounted:
            record = record.advance(StepStatus.SKIPPED)
            self._notify(record)
            logger.debug("step_skipped", kind=kind, reason="unmounted")
            return record, None

        record = record.advance(StepStatus.EXECUTING)
        self._notify(record)

        with metrics_collector.measure_duration() as timing:
            result = await self._dispatch(action, ctx)
        duration = timing.seconds

        status = StepStatus.SUCCEEDED if result.succeeded else StepStatus.FAILED
        record = record.advance(status, error=result.error, duration=duration)
        self._notify(record)

        metrics_collector.record_action_step(kind, status.value, duration)
        logger.info("step_finished", kind=kind, status=status.value, duration_ms=round(duration * 1000, 2))

        if result.follow_up is None:
            logger.debug("chain_ends", kind=kind, status=status.value)
        return record, result.follow_up

    async def _dispatch(self, action: BaseAction, ctx: "RenderContext") -> StepResult:
        if isinstance(action, RejectedAction):
            kind = DiagnosticKind.UNKNOWN_ACTION_KIND if action.unknown else DiagnosticKind.INVALID_ACTION
            ctx.diagnostics.report(kind, action.reason, source=action.requested, descriptor=action.raw)
            return StepResult.failure(action.reason)

        handler = self.handlers.get(action.kind.value)
        if handler is None:
            message = f"no handler for action kind: {action.kind.value}"
            ctx.diagnostics.report(DiagnosticKind.UNKNOWN_ACTION_KIND, message, source=action.kind.value)
            return StepResult.failure(message)

        try:
            return await handler(action, ctx)
        except Exception as e:
            message = str(e) or type(e).__name__
            ctx.diagnostics.report(
                DiagnosticKind.EFFECT_FAILURE,
                message,
                source=action.kind.value,
                error_type=type(e).__name__,
            )
            write_result(ctx, action, "error", error=message)
            return StepResult.failure(message, getattr(action, "on_error", None))

    def _notify(self, record: StepRecord) -> None:
        for listener in list(self.listeners):
            try:
                listener(record)
            except Exception as e:
                logger.error("step_listener_failed", error=str(e), exc_info=True)

    # ========================================================================
    # Background chains
    # ========================================================================

    def spawn(self, loop: asyncio.AbstractEventLoop, coro: Coroutine[Any, Any, ChainOutcome]) -> "asyncio.Task[ChainOutcome]":
        """Run a chain as a task, keeping a reference until it finishes."""
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every chain started through a trigger."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
