"""ID Generation.

ULID-based identifiers for action chains and their steps.

- K-sortable: steps of one chain sort in execution order
- Prefixed: chain_*, step_*, screen_* make logs readable
"""

from typing import NewType
from ulid import ULID

ChainID = NewType("ChainID", str)
"""One action chain started by a single trigger"""

StepID = NewType("StepID", str)
"""One descriptor executed inside a chain"""

ScreenID = NewType("ScreenID", str)
"""One mounted screen instance"""


class Prefix:
    """ID prefix constants."""

    CHAIN = "chain"
    STEP = "step"
    SCREEN = "screen"


def generate_prefixed(prefix: str) -> str:
    """Generate ULID with type prefix."""
    return f"{prefix}_{ULID()}"


def new_chain_id() -> ChainID:
    """Generate new chain ID."""
    return ChainID(generate_prefixed(Prefix.CHAIN))


def new_step_id() -> StepID:
    """Generate new step ID."""
    return StepID(generate_prefixed(Prefix.STEP))


def new_screen_id() -> ScreenID:
    """Generate new screen instance ID."""
    return ScreenID(generate_prefixed(Prefix.SCREEN))
