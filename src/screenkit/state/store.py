"""
View State Store
Per-screen observable key/value map.
"""

import threading
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from ..core import get_logger
from ..monitoring import metrics_collector

logger = get_logger(__name__)

StateListener = Callable[[Mapping[str, Any], frozenset[str]], None]
"""Called after a commit with the new immutable snapshot and the changed keys."""

_ABSENT = object()


class _Subscription:
    __slots__ = ("keys", "listener")

    def __init__(self, keys: Optional[frozenset[str]], listener: StateListener):
        self.keys = keys
        self.listener = listener

    def wants(self, changed: frozenset[str]) -> bool:
        return self.keys is None or not self.keys.isdisjoint(changed)


class ViewStateStore:
    """
    Flat key -> value state for one mounted screen.

    Writes are serialized: each commit swaps in a new dict under the lock,
    so readers only ever see whole updates. Listeners run after the commit
    on the writing thread and may write back into the store.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._state: dict[str, Any] = dict(initial or {})
        self._lock = threading.RLock()
        self._subscriptions: list[_Subscription] = []
        self._version = 0
        self._disposed = False

    # ========================================================================
    # Reads
    # ========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def snapshot(self) -> Mapping[str, Any]:
        """Immutable view of the current state."""
        return MappingProxyType(self._state)

    def __contains__(self, key: str) -> bool:
        return key in self._state

    def __len__(self) -> int:
        return len(self._state)

    @property
    def version(self) -> int:
        """Number of commits that changed at least one key."""
        return self._version

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ========================================================================
    # Writes
    # ========================================================================

    def set(self, updates: Mapping[str, Any]) -> frozenset[str]:
        """
        Apply all updates as one commit.

        Returns:
            Keys whose value actually changed (empty when disposed)
        """
        with self._lock:
            if self._disposed:
                logger.debug("state_write_ignored", reason="disposed", keys=list(updates))
                return frozenset()

            changed = frozenset(k for k, v in updates.items() if self._state.get(k, _ABSENT) != v)
            if not changed:
                return changed

            state = dict(self._state)
            state.update({k: updates[k] for k in changed})
            return self._commit(state, changed)

    def remove(self, keys: Iterable[str]) -> frozenset[str]:
        """Delete keys; returns those that were present."""
        with self._lock:
            if self._disposed:
                return frozenset()

            changed = frozenset(k for k in keys if k in self._state)
            if not changed:
                return changed

            state = {k: v for k, v in self._state.items() if k not in changed}
            return self._commit(state, changed)

    def clear(self) -> frozenset[str]:
        """Delete every key."""
        return self.remove(list(self._state))

    def _commit(self, state: dict[str, Any], changed: frozenset[str]) -> frozenset[str]:
        self._state = state
        self._version += 1
        snapshot = MappingProxyType(state)
        subscriptions = [s for s in self._subscriptions if s.wants(changed)]
        metrics_collector.record_state_commit()

        # Notify while still holding the re-entrant lock so listeners see
        # commits in order; a listener writing back re-enters on this thread.
        for subscription in subscriptions:
            try:
                subscription.listener(snapshot, changed)
            except Exception as e:
                logger.error("state_listener_failed", error=str(e), exc_info=True)

        return changed

    # ========================================================================
    # Subscriptions
    # ========================================================================

    def subscribe(self, keys: Optional[Iterable[str]], listener: StateListener) -> Callable[[], None]:
        """
        Listen for commits touching ``keys`` (every commit when None).

        Returns:
            Callable that removes the subscription
        """
        subscription = _Subscription(frozenset(keys) if keys is not None else None, listener)
        with self._lock:
            self._subscriptions.append(subscription)

        def _unsubscribe() -> None:
            with self._lock:
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

        return _unsubscribe

    def dispose(self) -> None:
        """Detach all listeners and ignore further writes."""
        with self._lock:
            self._disposed = True
            self._subscriptions.clear()
        logger.debug("state_disposed", version=self._version)
