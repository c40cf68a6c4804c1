"""
Effect Protocols
Boundaries between the action engine and the outside world.
"""

from typing import Any, Awaitable, Dict, Optional, Protocol, Union

from returns.result import Result

from ..models import AuthError, NetworkError, Response, Session, ValidationResult


class Navigator(Protocol):
    """Moves between screens"""

    def navigate(self, target: str, replace: bool = False, arguments: Optional[Dict[str, Any]] = None) -> None:
        ...


class AuthBackend(Protocol):
    """Session management"""

    async def login(self, email: str, password: str) -> Result[Session, AuthError]:
        ...

    def logout(self) -> Union[None, Awaitable[None]]:
        """Sync or async; failures raise."""
        ...


class NetworkBackend(Protocol):
    """Remote endpoint access"""

    async def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        **options: Any,
    ) -> Result[Response, NetworkError]:
        """
        Issue one request.

        Options: ``query_params``, ``headers``, ``timeout``.
        """
        ...


class FieldValidator(Protocol):
    """Validates one form field"""

    def validate(self, field_id: str) -> ValidationResult:
        ...
