"""
Error taxonomy shared by the session, enrollment and authoring layers.

Intent:
    Give every failure a stable machine `code` plus a message that can be
    shown to the user as-is. Callers branch on the class, log the code and
    display the message.

Design:
    - Local input problems: ValidationError, MissingIdentityError
    - Identity problems: AuthError, UnknownRoleError
    - Transport/backend problems: NetworkError, ServerError, DataShapeError
    - Enrollment problems: EnrollmentError, EnrollmentInFlightError
    - Signup problems: ProfileRegistrationError

Notes:
    None of these are fatal to the process; every failure is recoverable by a
    retry or a fresh login.
"""

from __future__ import annotations

from typing import Optional


class LmsClientError(Exception):
    """Base class for all client failures."""

    default_message = "Request failed"

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.code = code
        self.message = message or self.default_message


# ----------------------------- Local input ----------------------------------


class ValidationError(LmsClientError):
    """Required local input is missing or malformed; no call was made."""

    default_message = "Invalid input"


class MissingIdentityError(LmsClientError):
    """Enroll attempted without a session or a resolvable learner id."""

    default_message = "Unable to determine learner ID."


# ----------------------------- Identity -------------------------------------


class AuthError(LmsClientError):
    """Credentials rejected or authorization failed; the session is gone."""

    default_message = "Not authorized"


class UnknownRoleError(LmsClientError):
    """The backend reported a role outside LEARNER/AUTHOR/EXECUTIVE."""

    def __init__(self, role: object):
        super().__init__("unknown_role", f"Login failed: unknown role {role}")
        self.role = role


# ----------------------------- Transport ------------------------------------


class NetworkError(LmsClientError):
    """No response reached the client (connectivity, DNS, timeout)."""

    default_message = "Network error: Check your connection or backend"


class ServerError(LmsClientError):
    """A response arrived with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__("server_error", message or f"status {status_code}")
        self.status_code = status_code


class DataShapeError(LmsClientError):
    """A response arrived but lacks the fields we need."""

    default_message = "Unexpected response from server"


# ----------------------------- Enrollment -----------------------------------


class EnrollmentError(LmsClientError):
    """The enroll request did not go through; local state is untouched."""

    default_message = "Failed to enroll. Try again."


class EnrollmentInFlightError(EnrollmentError):
    """An enroll request for the same course is still pending."""

    def __init__(self, course_id: object):
        super().__init__("enroll_in_flight", f"Enrollment for course {course_id} is already in progress.")
        self.course_id = course_id


# ----------------------------- Registration ---------------------------------


class ProfileRegistrationError(LmsClientError):
    """The user account exists but the author profile could not be created."""

    def __init__(self, user_id: object, message: Optional[str] = None):
        super().__init__(
            "author_profile_failed",
            "User created but author profile couldn't be created: " + (message or "Unknown error"),
        )
        self.user_id = user_id


__all__ = [
    "LmsClientError",
    "ValidationError",
    "MissingIdentityError",
    "AuthError",
    "UnknownRoleError",
    "NetworkError",
    "ServerError",
    "DataShapeError",
    "EnrollmentError",
    "EnrollmentInFlightError",
    "ProfileRegistrationError",
]
