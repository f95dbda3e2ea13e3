"""
Identity domain constants and simple helpers.

Why:
- Centralize the allowed roles and their landing paths so no caller keeps its
  own copy of the role switch.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from ..errors import UnknownRoleError


class Role(str, Enum):
    LEARNER = "LEARNER"
    AUTHOR = "AUTHOR"
    EXECUTIVE = "EXECUTIVE"


# Total over Role. Immutable to prevent accidental mutation.
ROLE_HOME_PATHS = MappingProxyType(
    {
        Role.LEARNER: "/learner",
        Role.AUTHOR: "/author",
        Role.EXECUTIVE: "/executive",
    }
)


def parse_role(value: object) -> Role:
    """Return the Role for a backend value or raise UnknownRoleError."""
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        try:
            return Role(value)
        except ValueError:
            pass
    raise UnknownRoleError(value)


def home_path_for(role: Role) -> str:
    return ROLE_HOME_PATHS[role]


__all__ = ["Role", "ROLE_HOME_PATHS", "parse_role", "home_path_for"]
