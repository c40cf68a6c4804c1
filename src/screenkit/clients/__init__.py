"""Concrete effect collaborators."""

from .http import BackendError, BreakerListener, HttpAuthBackend, HttpNetworkBackend
from .navigation import BACK, NavigationStack, Route

__all__ = [
    "BackendError",
    "BreakerListener",
    "HttpAuthBackend",
    "HttpNetworkBackend",
    "BACK",
    "NavigationStack",
    "Route",
]
