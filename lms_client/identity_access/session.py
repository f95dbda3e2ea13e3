"""
Session lifecycle: credentials in, role-typed identity out.

Why: Every backend call after login depends on the session, and a session must
never outlive a revoked token. Keeping the state machine and the request choke
point in one place lets the enrollment and teaching layers stay oblivious of
tokens.

States:
    ANONYMOUS -> AUTHENTICATING -> AUTHENTICATED -> ANONYMOUS

Security: Tokens and passwords are never logged. The persisted token is only
written once the whole login succeeded.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging

from ..api_client import ApiClient
from ..errors import AuthError, ValidationError
from .decoders import decode_role, decode_token, decode_username
from .domain import Role, home_path_for
from .stores import LEARNER_ID_KEY, TOKEN_KEY, SessionStore


LOG = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    token: str
    role: Role
    username: str

    @property
    def home_path(self) -> str:
        return home_path_for(self.role)


class SessionManager:
    """Own the authentication state and gate all backend calls.

    Collaborators that must react to teardown (logout or a 401 anywhere)
    register a callback with `add_logout_listener`.
    """

    def __init__(self, api: ApiClient, store: SessionStore) -> None:
        self._api = api
        self._store = store
        self._session: Optional[Session] = None
        self._state = SessionState.ANONYMOUS
        self._epoch = 0
        self._listeners: List[Callable[[], None]] = []

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def epoch(self) -> int:
        """Incremented on every teardown; lets callers detect stale completions."""
        return self._epoch

    @property
    def home_path(self) -> Optional[str]:
        return self._session.home_path if self._session else None

    def require_session(self) -> Session:
        if self._session is None:
            raise AuthError("not_authenticated", "Please log in first.")
        return self._session

    def require_role(self, *roles: Role) -> Session:
        session = self.require_session()
        if session.role not in roles:
            raise AuthError("forbidden_role", f"This action is not available for role {session.role.value}.")
        return session

    def add_logout_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    # ------------------------------------------------------------- lifecycle

    async def login(self, username: str, password: str) -> Session:
        """Exchange credentials for a token, then fetch the role.

        The session is committed only after both calls succeeded and the role
        is known; otherwise nothing new is stored. A session held from an
        earlier login survives transport and shape failures, but rejected
        credentials end it.

        Raises
        - ValidationError for blank input (no network call)
        - AuthError when the credentials are rejected (session torn down)
        - DataShapeError / UnknownRoleError for unusable responses
        - NetworkError / ServerError from the transport
        """
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("credentials_required", "Username and password required")

        epoch = self._epoch
        self._state = SessionState.AUTHENTICATING
        try:
            token_body = await self._api.request("GET", "/user/token", basic_auth=(username, password))
            token = decode_token(token_body)
            details = await self._api.request("GET", "/user/details", token=token)
            role = decode_role(details)
        except AuthError:
            if self._epoch == epoch:
                LOG.warning("Credentials rejected for %s; ending session", username)
                self.logout()
            raise
        except Exception:
            if self._epoch == epoch:
                self._settle_state()
            raise

        if self._epoch != epoch:
            # logout() ran while we were waiting; it wins.
            raise AuthError("login_superseded", "Login was cancelled.")

        self._session = Session(token=token, role=role, username=username)
        self._store.set(TOKEN_KEY, token)
        self._state = SessionState.AUTHENTICATED
        LOG.info("Login successful for %s (role=%s)", username, role.value)
        return self._session

    async def resume(self) -> Optional[Session]:
        """Re-establish a session from the persisted token, if any.

        Returns None when no token is stored. A rejected token tears the
        persisted state down and raises AuthError.
        """
        if self._session is not None:
            return self._session
        token = self._store.get(TOKEN_KEY)
        if not token:
            return None

        epoch = self._epoch
        self._state = SessionState.AUTHENTICATING
        try:
            details = await self._api.request("GET", "/user/details", token=token)
            role = decode_role(details)
        except AuthError:
            if self._epoch == epoch:
                self.logout()
            raise
        except Exception:
            if self._epoch == epoch:
                self._settle_state()
            raise

        if self._epoch != epoch:
            raise AuthError("login_superseded", "Login was cancelled.")

        self._session = Session(token=token, role=role, username=decode_username(details) or "")
        self._state = SessionState.AUTHENTICATED
        LOG.info("Session resumed (role=%s)", role.value)
        return self._session

    def _settle_state(self) -> None:
        """Return to the state matching the session still held, if any."""
        self._state = SessionState.AUTHENTICATED if self._session is not None else SessionState.ANONYMOUS

    def logout(self) -> None:
        """Drop the session and the persisted state. Idempotent."""
        had_state = self._session is not None or self._state is not SessionState.ANONYMOUS
        self._store.clear(TOKEN_KEY)
        self._store.clear(LEARNER_ID_KEY)
        self._session = None
        self._state = SessionState.ANONYMOUS
        if not had_state:
            return
        self._epoch += 1
        LOG.info("Session ended")
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------- requests

    async def request(
        self,
        method: str,
        path: str,
        *,
        authenticated: bool = True,
        json: Any = None,
        files: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a backend request on behalf of the current session.

        Authenticated calls carry the session's bearer token on this request
        only. A 401 ends the session before the AuthError propagates, unless
        the session it was sent under has already ended.
        """
        token = self.require_session().token if authenticated else None
        epoch = self._epoch
        try:
            return await self._api.request(method, path, token=token, json=json, files=files, params=params)
        except AuthError:
            if self._epoch != epoch:
                LOG.debug("Ignoring authorization failure on %s %s from an ended session", method, path)
                raise
            LOG.warning("Authorization failure on %s %s; ending session", method, path)
            self.logout()
            raise


__all__ = ["Session", "SessionState", "SessionManager"]
