"""
Thin async HTTP adapter for the learning-platform REST backend.

Design:
- Framework-agnostic, used by the session, enrollment and teaching layers.
- Uses httpx under the hood; every call receives its credentials explicitly
  (bearer token or basic auth). There is no shared default Authorization
  header, so a request can never pick up a token it was not given.
- Maps outcomes onto the client error taxonomy: transport failures become
  NetworkError, 401 becomes AuthError, other non-2xx become ServerError.

Security:
- Do not log credentials or tokens.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple
import logging

import httpx

from .config import ClientConfig
from .errors import AuthError, NetworkError, ServerError


LOG = logging.getLogger(__name__)


def _decode_body(resp: httpx.Response) -> Any:
    """Return the JSON body, the raw text for non-JSON bodies, or None when empty."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _server_message(resp: httpx.Response) -> Optional[str]:
    """Prefer a server-supplied `message`, then a plain string body."""
    body = _decode_body(resp)
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        return None
    if isinstance(body, str) and body.strip():
        return body.strip()[:200]
    return None


class ApiClient:
    """Issue requests against the backend base URL.

    The client owns one `httpx.AsyncClient` (connection pooling). Pass a
    custom `transport` to route requests elsewhere, e.g. `httpx.MockTransport`
    in tests.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_config(
        cls, cfg: ClientConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "ApiClient":
        return cls(cfg.api_url, timeout=float(cfg.timeout_seconds), transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        basic_auth: Optional[Tuple[str, str]] = None,
        json: Any = None,
        files: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request and return the decoded body.

        Parameters
        - token: bearer token bound to this request only
        - basic_auth: (username, password) for the credential exchange

        Raises
        - NetworkError when no response arrived
        - AuthError on 401
        - ServerError on any other non-success status
        """
        kwargs: Dict[str, Any] = {}
        if token:
            kwargs["headers"] = {"Authorization": f"Bearer {token}"}
        if basic_auth is not None:
            kwargs["auth"] = httpx.BasicAuth(*basic_auth)
        if json is not None:
            kwargs["json"] = json
        if files is not None:
            kwargs["files"] = files
        if params is not None:
            kwargs["params"] = params

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            LOG.warning("%s %s network error: %s", method, path, type(exc).__name__)
            raise NetworkError("network_unreachable") from exc

        LOG.debug("%s %s -> %d", method, path, resp.status_code)
        if resp.status_code == 401:
            raise AuthError(
                "unauthorized",
                _server_message(resp) or "Session expired or invalid. Please log in again.",
            )
        if not resp.is_success:
            LOG.warning("%s %s failed: HTTP %d", method, path, resp.status_code)
            raise ServerError(resp.status_code, _server_message(resp))
        return _decode_body(resp)


__all__ = ["ApiClient"]
