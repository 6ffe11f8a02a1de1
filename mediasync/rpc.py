"""HTTP client with retry and exponential backoff for remote calls."""

import json
import time
from typing import Any, Callable, Dict, Optional

import requests  # type: ignore[import-untyped]

from mediasync.config import (
    DEFAULT_MAX_RETRIES,
    HEADERS,
    REQUEST_TIMEOUT,
    RETRY_BACKOFF_BASE,
    RETRY_STATUS_CODES,
)
from mediasync.errors import RemoteCallError
from mediasync.logging_config import get_logger

__all__ = [
    "create_session",
    "backoff_delay",
    "RpcClient",
]

logger = get_logger("rpc")


class _TransientFailure(RemoteCallError):
    """A failed attempt that may succeed when retried."""

    def __init__(self, message: str, reason: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message, status=status, payload=payload)
        self.reason = reason


def create_session() -> requests.Session:
    """Create a requests Session with connection pooling and default headers."""
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    return session


def backoff_delay(attempt: int, base: float = RETRY_BACKOFF_BASE) -> float:
    """Delay in seconds before retrying after failed attempt ``attempt`` (1-based)."""
    return base * 2 ** (attempt - 1)


class RpcClient:
    """Executes remote calls with bounded retries.

    A call is attempted at most ``max_retries`` times. HTTP 429/5xx,
    connection errors, timeouts and GraphQL ``errors`` payloads are
    retried after ``backoff_base * 2^(n-1)`` seconds; any other failure
    raises immediately.

    Usage:
        client = RpcClient(max_retries=3)
        data = client.graphql(url, "query { shop { name } }", headers=auth)
        resp = client.fetch(endpoint)
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = RETRY_BACKOFF_BASE,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_retries = max(1, max_retries)
        self.backoff_base = backoff_base
        self.timeout = timeout
        self.session = session or create_session()
        self._sleep = sleep

    def call(
        self,
        method: str,
        url: str,
        label: str = "request",
        graphql: bool = False,
        retry_transport: bool = True,
        **kwargs: Any,
    ) -> Any:
        """Perform one logical call, retrying transient failures.

        Args:
            method: HTTP method
            url: Target URL
            label: Name used in log and error messages
            graphql: Decode a ``{data, errors}`` envelope and return ``data``
            retry_transport: Retry read timeouts and dropped connections. Mutations
                pass False since the server may already have applied them.
            **kwargs: Passed through to ``Session.request``

        Returns:
            The ``data`` object for GraphQL calls, else the Response

        Raises:
            RemoteCallError: On a non-retryable failure or once retries run out
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                return self._attempt(method, url, label, graphql, retry_transport, **kwargs)
            except _TransientFailure as e:
                if attempt >= self.max_retries:
                    logger.error(f"{label} failed after {self.max_retries} attempts: {e}")
                    raise RemoteCallError(str(e), status=e.status, payload=e.payload) from e
                delay = backoff_delay(attempt, self.backoff_base)
                logger.warning(
                    f"{label} {e.reason}; retry {attempt}/{self.max_retries} in {delay * 1000:.0f}ms"
                )
                self._sleep(delay)

    def graphql(
        self,
        url: str,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        retry_transport: bool = True,
    ) -> Dict[str, Any]:
        """POST a GraphQL operation and return its ``data`` object."""
        return self.call(
            "POST",
            url,
            label="GraphQL",
            graphql=True,
            retry_transport=retry_transport,
            json={"query": query, "variables": variables or {}},
            headers={"Content-Type": "application/json", **(headers or {})},
        )

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None, label: str = "GET") -> requests.Response:
        """GET a URL with retries and return the successful Response."""
        return self.call("GET", url, label=label, headers=headers or {})

    def _attempt(
        self, method: str, url: str, label: str, graphql: bool, retry_transport: bool, **kwargs: Any
    ) -> Any:
        kwargs.setdefault("timeout", self.timeout)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.exceptions.ConnectTimeout as e:
            # Never reached the server
            raise _TransientFailure(f"{label} connect timeout: {e}", reason="connect timeout") from e
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            reason = "timeout" if isinstance(e, requests.exceptions.Timeout) else "connection error"
            if not retry_transport:
                raise RemoteCallError(f"{label} {reason}: {e}") from e
            raise _TransientFailure(f"{label} {reason}: {e}", reason=reason) from e
        except requests.exceptions.RequestException as e:
            raise RemoteCallError(f"{label} request failed: {e}") from e

        if not resp.ok:
            body = resp.text
            message = f"{label} HTTP {resp.status_code}: {body}"
            if resp.status_code in RETRY_STATUS_CODES:
                raise _TransientFailure(message, reason=str(resp.status_code), status=resp.status_code, payload=body)
            raise RemoteCallError(message, status=resp.status_code, payload=body)

        if not graphql:
            return resp

        try:
            envelope = resp.json()
        except ValueError as e:
            raise RemoteCallError(
                f"{label} returned invalid JSON", status=resp.status_code, payload=resp.text
            ) from e
        if not isinstance(envelope, dict):
            raise RemoteCallError(f"{label} returned an unexpected body", status=resp.status_code, payload=envelope)

        errors = envelope.get("errors")
        if errors:
            raise _TransientFailure(
                f"{label} errors: {json.dumps(errors)}",
                reason="errors",
                status=resp.status_code,
                payload=errors,
            )
        return envelope.get("data") or {}
