"""In-memory navigation history."""

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..core import get_logger

logger = get_logger(__name__)

# Target that pops the current route instead of pushing
BACK = "back"


@dataclass(frozen=True)
class Route:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


RouteListener = Callable[[Optional[Route]], None]


class NavigationStack:
    """
    Navigator keeping a route history.

    Hosts subscribe to route changes and swap the mounted screen.
    """

    def __init__(self, initial: Optional[str] = None):
        self._routes: List[Route] = [Route(initial)] if initial else []
        self._listeners: List[RouteListener] = []
        self._lock = threading.Lock()

    def navigate(self, target: str, replace: bool = False, arguments: Optional[Dict[str, Any]] = None) -> None:
        if target == BACK:
            self.pop()
            return

        route = Route(target, dict(arguments or {}))
        with self._lock:
            if replace and self._routes:
                self._routes[-1] = route
            else:
                self._routes.append(route)

        logger.info("navigated", target=target, replace=replace, depth=len(self._routes))
        self._notify(route)

    def pop(self) -> Optional[Route]:
        """Drop the current route; the root route is never popped."""
        with self._lock:
            if len(self._routes) <= 1:
                logger.debug("pop_ignored", depth=len(self._routes))
                return None
            popped = self._routes.pop()
            current = self._routes[-1]

        logger.info("popped", route=popped.name, current=current.name)
        self._notify(current)
        return popped

    @property
    def current(self) -> Optional[Route]:
        return self._routes[-1] if self._routes else None

    @property
    def history(self) -> List[Route]:
        return list(self._routes)

    @property
    def can_pop(self) -> bool:
        return len(self._routes) > 1

    def add_listener(self, listener: RouteListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self, route: Optional[Route]) -> None:
        for listener in list(self._listeners):
            try:
                listener(route)
            except Exception as e:
                logger.error("route_listener_failed", error=str(e), exc_info=True)

    def __len__(self) -> int:
        return len(self._routes)
