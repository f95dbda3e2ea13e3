"""
Account signup, including the author profile step.

Behavior:
    - Creates the user account (`POST /user/signup`).
    - For authors, registers the author profile (`POST /author/register`)
      with the id of the account just created.
    - When the profile step fails the account already exists; the error
      carries the new user id so the caller can tell the user what happened.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
import logging

from ..api_client import ApiClient
from ..errors import LmsClientError, ProfileRegistrationError, ValidationError
from .domain import Role, parse_role


LOG = logging.getLogger(__name__)


@dataclass
class AuthorProfileInput:
    full_name: str
    contact: Optional[str] = None
    website: Optional[str] = None
    profile_pic: Optional[str] = None


@dataclass
class SignupResult:
    user_id: Any
    role: Role


def _resolve_user_id(body: Any) -> Any:
    """Signup responses carry the id as `id`, `userId` or as the bare body."""
    if isinstance(body, dict):
        if body.get("id") is not None:
            return body["id"]
        if body.get("userId") is not None:
            return body["userId"]
    return body


async def signup(
    api: ApiClient,
    *,
    username: str,
    password: str,
    role: object = Role.LEARNER,
    author_profile: Optional[AuthorProfileInput] = None,
) -> SignupResult:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("credentials_required", "Username and password are required")
    parsed_role = parse_role(role)
    if parsed_role is Role.AUTHOR and (author_profile is None or not author_profile.full_name.strip()):
        raise ValidationError("full_name_required", "Full name is required for authors")

    body = await api.request(
        "POST",
        "/user/signup",
        json={"username": username, "password": password, "role": parsed_role.value},
    )
    user_id = _resolve_user_id(body)
    LOG.info("Created user account %s (role=%s)", username, parsed_role.value)

    if parsed_role is Role.AUTHOR and author_profile is not None:
        payload = {
            "fullName": author_profile.full_name.strip(),
            "contact": author_profile.contact or None,
            "website": author_profile.website or None,
            "profilePic": author_profile.profile_pic or None,
            "userId": user_id,
        }
        try:
            await api.request("POST", "/author/register", json=payload)
        except LmsClientError as exc:
            LOG.warning("Author profile registration failed for %s: %s", username, exc.code)
            raise ProfileRegistrationError(user_id, exc.message) from exc

    return SignupResult(user_id=user_id, role=parsed_role)


__all__ = ["AuthorProfileInput", "SignupResult", "signup"]
