"""
Action Execution Types
Step records and chain outcomes.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable

from ..core import ChainID, StepID
from ..models import BaseAction


class StepStatus(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def terminal(self) -> bool:
        return self in (StepStatus.SUCCEEDED, StepStatus.FAILED, StepStatus.SKIPPED)


@dataclass(frozen=True)
class StepRecord:
    """State of one step at one point of its lifecycle."""

    step_id: StepID
    chain_id: ChainID
    kind: str
    index: int
    status: StepStatus = StepStatus.PENDING
    error: str | None = None
    duration: float = 0.0

    def advance(self, status: StepStatus, **changes: Any) -> "StepRecord":
        return replace(self, status=status, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "step_id": self.step_id,
            "chain_id": self.chain_id,
            "kind": self.kind,
            "index": self.index,
            "status": self.status.value,
            "error": self.error,
            "duration": self.duration,
        }


StepListener = Callable[[StepRecord], None]
"""Observes every status transition of every step."""


@dataclass
class StepResult:
    """What a handler decided: outcome, payload and the follow-up to run."""

    succeeded: bool
    follow_up: BaseAction | None = None
    payload: Any = None
    error: str | None = None

    @classmethod
    def success(cls, follow_up: BaseAction | None = None, payload: Any = None) -> "StepResult":
        return cls(succeeded=True, follow_up=follow_up, payload=payload)

    @classmethod
    def failure(cls, error: str, follow_up: BaseAction | None = None, payload: Any = None) -> "StepResult":
        return cls(succeeded=False, follow_up=follow_up, payload=payload, error=error)


@dataclass
class ChainOutcome:
    """Ordered terminal records of every step a chain ran."""

    chain_id: ChainID
    steps: list[StepRecord] = field(default_factory=list)

    @property
    def last(self) -> StepRecord | None:
        return self.steps[-1] if self.steps else None

    @property
    def succeeded(self) -> bool:
        """True when the final step succeeded."""
        return self.last is not None and self.last.status == StepStatus.SUCCEEDED

    @property
    def kinds(self) -> list[str]:
        return [step.kind for step in self.steps]

    def count(self, status: StepStatus) -> int:
        return sum(1 for step in self.steps if step.status == status)
