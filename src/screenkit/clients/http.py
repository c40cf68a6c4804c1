"""HTTP Effect Backends"""

import asyncio
from typing import Any, Dict, Optional

import httpx
import pybreaker
from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from ..core import ScreenKitError, get_logger
from ..models import AuthError, NetworkError, Response, Session

logger = get_logger(__name__)

# Methods sent without a JSON body
_BODYLESS = {"GET", "HEAD", "DELETE", "OPTIONS"}


class BackendError(ScreenKitError):
    """A backend call that must raise (logout) failed."""

    pass


class BreakerListener(pybreaker.CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        """Called when circuit breaker state changes."""
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state),
            to_state=str(new_state),
        )


class HttpNetworkBackend:
    """
    NetworkBackend over httpx with circuit breaker protection.

    Requests run on a blocking client in a worker thread so the event loop
    never waits on the network. Server errors (5xx) and transport errors
    count against the breaker; client errors (4xx) do not.
    """

    def __init__(
        self,
        backend_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        fail_max: int = 5,
        reset_timeout: int = 30,
    ) -> None:
        """
        Initialize backend with circuit breaker.

        Args:
            backend_url: Base URL that relative endpoints resolve against
            timeout: Default request timeout in seconds
            fail_max: Consecutive failures before the breaker opens
            reset_timeout: Seconds before the breaker lets a trial call through
        """
        self.backend_url = backend_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout)
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=fail_max,
            reset_timeout=reset_timeout,
            name="screen-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", url=self.backend_url)

    def url_for(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.backend_url}/{endpoint.lstrip('/')}"

    def set_token(self, token: Optional[str]) -> None:
        """Attach (or drop) a bearer token for every later request."""
        if token:
            self._client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._client.headers.pop("Authorization", None)

    @property
    def breaker_state(self) -> str:
        return self._breaker.current_state

    async def request(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        *,
        query_params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Result[Response, NetworkError]:
        """Issue one request off the event loop."""
        return await asyncio.to_thread(
            self.request_sync,
            method,
            endpoint,
            body,
            query_params=query_params,
            headers=headers,
            timeout=timeout,
        )

    def request_sync(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        *,
        query_params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Result[Response, NetworkError]:
        """
        Issue one request on the calling thread.

        Returns:
            Success with the decoded response, or Failure describing the
            transport error, HTTP error status or open breaker
        """
        method = method.upper()
        url = self.url_for(endpoint)

        def _make_request() -> httpx.Response:
            response = self._client.request(
                method,
                url,
                json=None if method in _BODYLESS or body is None else body,
                params=query_params,
                headers=headers,
                timeout=timeout or self.timeout,
            )
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            response = self._breaker.call(_make_request)
        except pybreaker.CircuitBreakerError:
            logger.error("request_failed", url=url, error="Circuit breaker open - backend unavailable")
            return Failure(NetworkError(message="backend unavailable (circuit breaker open)"))
        except httpx.HTTPStatusError as e:
            logger.warning("http_error", url=url, status_code=e.response.status_code)
            return Failure(
                NetworkError(
                    message=f"HTTP {e.response.status_code}",
                    status_code=e.response.status_code,
                    data=_decode(e.response),
                )
            )
        except httpx.HTTPError as e:
            logger.warning("http_error", url=url, error=str(e))
            return Failure(NetworkError(message=str(e) or type(e).__name__))

        data = _decode(response)
        if response.is_error:
            logger.info("request_rejected", url=url, status_code=response.status_code)
            return Failure(NetworkError(message=f"HTTP {response.status_code}", status_code=response.status_code, data=data))

        logger.debug("request_ok", method=method, url=url, status_code=response.status_code)
        return Success(Response(status_code=response.status_code, data=data, headers=dict(response.headers)))

    def health_check(self) -> bool:
        """
        Check if backend is reachable (bypasses circuit breaker).

        Returns:
            True if backend is healthy
        """
        try:
            response = self._client.get(f"{self.backend_url}/health", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def close(self) -> None:
        self._client.close()


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpAuthBackend:
    """AuthBackend posting credentials to the backend; shares the network client and breaker."""

    def __init__(self, network: HttpNetworkBackend, login_path: str = "/auth/login", logout_path: str = "/auth/logout"):
        self.network = network
        self.login_path = login_path
        self.logout_path = logout_path
        self.session: Optional[Session] = None

    async def login(self, email: str, password: str) -> Result[Session, AuthError]:
        result = await self.network.request("POST", self.login_path, {"email": email, "password": password})

        if not is_successful(result):
            error = result.failure()
            code = str(error.status_code) if error.status_code is not None else None
            message = error.message
            if isinstance(error.data, dict) and isinstance(error.data.get("error"), str):
                message = error.data["error"]
            logger.info("login_rejected", code=code)
            return Failure(AuthError(message=message, code=code))

        data = result.unwrap().data
        data = data if isinstance(data, dict) else {}
        user_id = data.get("userId", data.get("user_id"))
        session = Session(
            user_id=None if user_id is None else str(user_id),
            token=data.get("token") or data.get("accessToken"),
            data=data,
        )

        self.session = session
        self.network.set_token(session.token)
        logger.info("login_succeeded", user_id=session.user_id)
        return Success(session)

    async def logout(self) -> None:
        """
        End the session remotely, then locally.

        Raises:
            BackendError: Backend rejected the logout (local session is
                dropped anyway)
        """
        had_session = self.session is not None
        self.session = None

        try:
            if not had_session:
                return
            result = await self.network.request("POST", self.logout_path)
        finally:
            self.network.set_token(None)

        if not is_successful(result):
            raise BackendError(f"logout failed: {result.failure().message}")
        logger.info("logout_succeeded")
