"""Author-facing course services (course list, content, stats, profile).

Why:
    Keeps request building and response decoding out of the CLI so the
    validation rules can be unit-tested without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional
import asyncio
import logging

from ..errors import DataShapeError, ValidationError
from ..identity_access.domain import Role
from ..identity_access.session import SessionManager
from ..models import Author, Course, Identifier, Video, decode_list
from .aggregation import CourseTree, aggregate


LOG = logging.getLogger(__name__)


@dataclass
class CourseContent:
    tree: CourseTree
    reviews: List[dict]


@dataclass(frozen=True)
class EnrollmentStat:
    course_title: str
    enrollments: int


def _normalize_title(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("invalid_title", "Course title is required")
    return value.strip()


def _normalize_credits(value: object) -> float:
    if isinstance(value, bool):
        raise ValidationError("invalid_credits", "Credits must be a positive number")
    try:
        credits = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError("invalid_credits", "Credits must be a positive number")
    if credits <= 0:
        raise ValidationError("invalid_credits", "Credits must be a positive number")
    return credits


def decode_stats(body: Any) -> List[EnrollmentStat]:
    """Zip the parallel `courseTitles` / `enrollments` arrays."""
    if not isinstance(body, dict):
        raise DataShapeError("stats_invalid", "Unexpected enrollment statistics response")
    titles = body.get("courseTitles") or []
    counts = body.get("enrollments") or []
    if not isinstance(titles, list) or not isinstance(counts, list) or len(titles) != len(counts):
        raise DataShapeError("stats_mismatch", "Course titles and enrollment counts do not line up")
    stats = []
    for title, count in zip(titles, counts):
        try:
            stats.append(EnrollmentStat(course_title=str(title), enrollments=int(count)))
        except (TypeError, ValueError) as exc:
            raise DataShapeError("stats_invalid", f"Invalid enrollment count: {count!r}") from exc
    return stats


class CourseService:
    def __init__(self, sessions: SessionManager) -> None:
        self._sessions = sessions

    async def list_author_courses(self) -> List[Course]:
        self._sessions.require_role(Role.AUTHOR)
        body = await self._sessions.request("GET", "/course/getCoursesByAuthor")
        courses = [Course.from_payload(item) for item in decode_list(body, "course")]
        LOG.info("Loaded %d author courses", len(courses))
        return courses

    async def add_course(self, *, title: object, credits: object, image: Optional[str] = None) -> Any:
        self._sessions.require_role(Role.AUTHOR)
        payload = {
            "title": _normalize_title(title),
            "credits": _normalize_credits(credits),
            "image": (image or "").strip() or None,
        }
        body = await self._sessions.request("POST", "/course/add", json=payload)
        LOG.info("Course added: %s", payload["title"])
        return body

    async def list_all_courses(self) -> List[Course]:
        body = await self._sessions.request("GET", "/course/getAllCourses", authenticated=False)
        return [Course.from_payload(item) for item in decode_list(body, "course")]

    async def course_content(self, course_id: Identifier) -> CourseContent:
        """Fetch videos and reviews together and rebuild the course tree."""
        self._sessions.require_session()
        results = await asyncio.gather(
            self._sessions.request("GET", f"/video/getAllVideos/{course_id}"),
            self._sessions.request("GET", f"/review/getReviewsByCourse/{course_id}"),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        videos_body, reviews_body = results
        videos = [Video.from_payload(item) for item in decode_list(videos_body, "video")]
        reviews = [r for r in decode_list(reviews_body, "review") if isinstance(r, dict)]
        return CourseContent(tree=aggregate(videos), reviews=reviews)

    async def enrollment_stats(self) -> List[EnrollmentStat]:
        self._sessions.require_session()
        body = await self._sessions.request("GET", "/learner/course/getEnrollments")
        return decode_stats(body)

    async def author_profile(self) -> Author:
        self._sessions.require_role(Role.AUTHOR)
        body = await self._sessions.request("GET", "/author/get")
        return Author.from_payload(body)

    async def upload_profile_picture(self, *, filename: str, content: bytes) -> str:
        self._sessions.require_role(Role.AUTHOR)
        if not filename or not content:
            raise ValidationError("file_required", "Select a file first.")
        body = await self._sessions.request(
            "POST",
            "/author/upload/profile-pic",
            files={"file": (filename, content)},
        )
        if isinstance(body, dict) and body.get("fileName"):
            return str(body["fileName"])
        if isinstance(body, str) and body:
            return body
        raise DataShapeError("file_name_missing", "Upload succeeded but no file name was returned")


__all__ = ["CourseContent", "CourseService", "EnrollmentStat", "decode_stats"]
