"""Identity access: roles, persisted state, session lifecycle and signup."""

from .domain import ROLE_HOME_PATHS, Role, home_path_for, parse_role
from .session import Session, SessionManager, SessionState
from .stores import FileSessionStore, InMemorySessionStore, SessionStore

__all__ = [
    "Role",
    "ROLE_HOME_PATHS",
    "home_path_for",
    "parse_role",
    "Session",
    "SessionManager",
    "SessionState",
    "SessionStore",
    "InMemorySessionStore",
    "FileSessionStore",
]
