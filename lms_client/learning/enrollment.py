"""
Enrollment state: server-authoritative list plus acknowledged local updates.

Why:
    The learner catalog needs to know, per course, whether the learner is
    enrolled, and must reflect a fresh enrollment immediately without a full
    reload. Local state is only touched after the backend acknowledged the
    enroll request, so there is never anything to roll back.

Behavior:
    - `load()` fetches the catalog and the learner's enrollments concurrently
      and commits both only when both succeeded.
    - `enroll()` needs a session and a resolvable learner id before any call
      is made, and allows one pending request per course.
    - Logout (explicit or triggered by a 401) clears the store. Completions
      that arrive after `close()` or a logout are dropped.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Set, Tuple
import asyncio
import logging

from ..errors import (
    DataShapeError,
    EnrollmentError,
    EnrollmentInFlightError,
    MissingIdentityError,
    NetworkError,
    ServerError,
)
from ..identity_access.session import SessionManager
from ..models import Course, Enrollment, Identifier, course_key, decode_list
from .identity import IdentityResolver


LOG = logging.getLogger(__name__)


class EnrollmentStore:
    def __init__(self, sessions: SessionManager, resolver: IdentityResolver) -> None:
        self._sessions = sessions
        self._resolver = resolver
        self._catalog: List[Course] = []
        # keyed by course_key(); `5` and `"5"` share one entry
        self._enrollments: Dict[str, Enrollment] = {}
        self._in_flight: Set[str] = set()
        self._generation = 0
        sessions.add_logout_listener(self._on_session_end)

    # ---------------------------------------------------------------- views

    @property
    def catalog(self) -> Tuple[Course, ...]:
        return tuple(self._catalog)

    @property
    def enrollments(self) -> Tuple[Enrollment, ...]:
        return tuple(self._enrollments.values())

    @property
    def membership(self) -> Mapping[Identifier, bool]:
        """course id -> enrolled, covering the catalog and every enrollment."""
        mapping: Dict[Identifier, bool] = {}
        listed = set()
        for course in self._catalog:
            key = course_key(course.id)
            listed.add(key)
            mapping[course.id] = key in self._enrollments
        for key, enrollment in self._enrollments.items():
            if key not in listed:
                mapping[enrollment.course_id] = True
        return mapping

    def is_enrolled(self, course_id: Identifier) -> bool:
        return course_key(course_id) in self._enrollments

    def is_pending(self, course_id: Identifier) -> bool:
        return course_key(course_id) in self._in_flight

    def _find_course(self, key: str) -> Optional[Course]:
        return next((c for c in self._catalog if course_key(c.id) == key), None)

    def search(self, term: str) -> Tuple[Course, ...]:
        needle = (term or "").strip().lower()
        if not needle:
            return self.catalog
        return tuple(c for c in self._catalog if needle in c.title.lower())

    # ------------------------------------------------------------ lifecycle

    def close(self) -> None:
        """Detach the consumer; pending completions will not touch state."""
        self._generation += 1
        self._in_flight.clear()

    def _on_session_end(self) -> None:
        self._generation += 1
        self._in_flight.clear()
        self._catalog = []
        self._enrollments = {}

    # ----------------------------------------------------------- operations

    async def load(self) -> bool:
        """Fetch catalog and enrollments; return False if the result went stale.

        Raises NetworkError/ServerError/DataShapeError (or AuthError after the
        session was torn down). Existing state is untouched on failure.
        """
        self._sessions.require_session()
        generation = self._generation
        results = await asyncio.gather(
            self._sessions.request("GET", "/course/getAllCourses", authenticated=False),
            self._sessions.request("GET", "/learner/courses"),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                LOG.warning("Loading courses failed: %s", getattr(result, "code", type(result).__name__))
                raise result
        catalog_body, enrolled_body = results

        catalog = [Course.from_payload(item) for item in decode_list(catalog_body, "course")]
        enrollments: Dict[str, Enrollment] = {}
        for item in decode_list(enrolled_body, "enrollment"):
            enrollment = Enrollment.from_payload(item)
            enrollments.setdefault(course_key(enrollment.course_id), enrollment)

        if generation != self._generation:
            LOG.debug("Discarding stale course load")
            return False
        self._catalog = catalog
        self._enrollments = enrollments
        LOG.info("Loaded %d courses, %d enrollments", len(catalog), len(enrollments))
        return True

    async def enroll(self, course_id: Identifier) -> Optional[Enrollment]:
        """Enroll the current learner in `course_id`.

        Returns the enrollment, or None when the store was torn down while the
        request was pending.

        Raises
        - MissingIdentityError without session or learner id (no call made)
        - EnrollmentInFlightError when the same course is already pending
        - EnrollmentError when the backend rejected the request
        - AuthError on authorization failure (session already ended)
        """
        if self._sessions.session is None:
            raise MissingIdentityError("not_authenticated", "Please log in to enroll.")
        key = course_key(course_id)
        if key in self._in_flight:
            raise EnrollmentInFlightError(course_id)
        existing = self._enrollments.get(key)
        if existing is not None:
            return existing
        learner_id = self._resolver.resolve_learner_id(list(self._enrollments.values()))
        if not learner_id:
            raise MissingIdentityError("learner_id_unresolved")

        course = self._find_course(key)
        if course is not None:
            course_id = course.id
        generation = self._generation
        self._in_flight.add(key)
        try:
            await self._sessions.request("POST", f"/learner/enroll/course/{learner_id}/{key}")
        except (NetworkError, ServerError, DataShapeError) as exc:
            LOG.warning("Enroll in course %s failed: %s", key, exc.code)
            raise EnrollmentError("enroll_rejected", f"Failed to enroll: {exc.message}") from exc
        finally:
            if generation == self._generation:
                self._in_flight.discard(key)

        if generation != self._generation:
            LOG.debug("Discarding stale enroll completion for course %s", key)
            return None
        entry = self._enrollments.get(key)
        if entry is None:
            title = course.title if course is not None else None
            entry = Enrollment(course_id=course_id, learner_id=learner_id, progress=0.0, title=title)
            self._enrollments[key] = entry
        LOG.info("Enrolled in course %s", key)
        return entry


__all__ = ["EnrollmentStore"]
