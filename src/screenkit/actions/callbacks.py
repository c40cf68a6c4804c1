"""
Callback Registry
Host-registered handlers for ``custom`` actions.
"""

from typing import Any, Callable, Dict, List, Optional

from ..core import get_logger

logger = get_logger(__name__)

Callback = Callable[..., Any]
"""Called with the descriptor's ``parameters`` as keyword arguments; may be async."""


class CallbackRegistry:
    """
    Named callbacks reachable from documents through ``{"action": "custom"}``.
    The last registration for a name wins.
    """

    def __init__(self):
        self.callbacks: Dict[str, Callback] = {}

    def register(self, name: str, callback: Callback) -> None:
        if name in self.callbacks:
            logger.debug("callback_replaced", name=name)
        self.callbacks[name] = callback

    def callback(self, name: str) -> Callable[[Callback], Callback]:
        """
        Decorator form of ``register``.

        Example:
            @callbacks.callback("share")
            async def share(url: str) -> None: ...
        """
        def decorator(fn: Callback) -> Callback:
            self.register(name, fn)
            return fn

        return decorator

    def unregister(self, name: str) -> None:
        self.callbacks.pop(name, None)

    def get(self, name: str) -> Optional[Callback]:
        return self.callbacks.get(name)

    def list_names(self) -> List[str]:
        return sorted(self.callbacks)

    def __contains__(self, name: str) -> bool:
        return name in self.callbacks

    def __len__(self) -> int:
        return len(self.callbacks)
