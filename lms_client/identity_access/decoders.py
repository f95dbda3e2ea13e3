"""
Typed decoders for the identity endpoints.

The user-details endpoint reports the role in one of two shapes:
`{"user": {"role": ...}}` or `{"role": ...}`. Shapes are tried in order; when
none matches a DataShapeError is raised instead of letting a missing value
travel further.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from ..errors import DataShapeError
from .domain import Role, parse_role


def _nested(field: str) -> Callable[[Any], Any]:
    def read(body: Any) -> Any:
        user = body.get("user") if isinstance(body, dict) else None
        return user.get(field) if isinstance(user, dict) else None

    return read


def _top_level(field: str) -> Callable[[Any], Any]:
    def read(body: Any) -> Any:
        return body.get(field) if isinstance(body, dict) else None

    return read


ROLE_SHAPES: Sequence[Callable[[Any], Any]] = (_nested("role"), _top_level("role"))
USERNAME_SHAPES: Sequence[Callable[[Any], Any]] = (_nested("username"), _top_level("username"))


def _first_present(body: Any, shapes: Sequence[Callable[[Any], Any]]) -> Optional[Any]:
    for read in shapes:
        value = read(body)
        if value not in (None, ""):
            return value
    return None


def decode_token(body: Any) -> str:
    token = body.get("token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token:
        raise DataShapeError("token_missing", "Login failed: token not returned")
    return token


def decode_role(body: Any) -> Role:
    """Return the role from a user-details body.

    Raises DataShapeError when no known shape carries a role and
    UnknownRoleError when the value is outside the enum.
    """
    if not isinstance(body, dict):
        raise DataShapeError("details_invalid", "Login failed: invalid user details response")
    raw = _first_present(body, ROLE_SHAPES)
    if raw is None:
        raise DataShapeError("role_missing", "Login failed: role information missing")
    return parse_role(raw)


def decode_username(body: Any) -> Optional[str]:
    value = _first_present(body, USERNAME_SHAPES)
    return str(value) if value is not None else None


__all__ = ["decode_token", "decode_role", "decode_username"]
