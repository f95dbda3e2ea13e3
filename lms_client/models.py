"""
Domain records decoded from backend JSON.

Intent:
    Turn the backend's camelCase payloads into small dataclasses once, at the
    edge, so aggregation and enrollment logic never deals with raw dicts.

Notes:
    Decoders raise DataShapeError when an identifying field is missing. Purely
    descriptive fields fall back to empty values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import DataShapeError


Identifier = Union[int, str]


def _require_dict(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise DataShapeError(f"{what}_invalid", f"Unexpected {what} record from server")
    return payload


def _require_id(payload: Dict[str, Any], key: str, what: str) -> Identifier:
    value = payload.get(key)
    if value is None or isinstance(value, bool) or not isinstance(value, (int, str)):
        raise DataShapeError(f"{what}_id_missing", f"{what.capitalize()} record without {key}")
    return value


def _number(value: Any, what: str) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise DataShapeError(f"{what}_invalid", f"Invalid {what}: {value!r}") from exc


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def course_key(course_id: Identifier) -> str:
    """Lookup key for a course id; `5` and `"5"` name the same course."""
    return str(course_id).strip()


def decode_list(payload: Any, what: str) -> List[Any]:
    """Backend collections are JSON arrays; a null body means empty."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise DataShapeError(f"{what}_list_invalid", f"Expected a list of {what} records")
    return payload


# ------------------------------- Records ------------------------------------


@dataclass
class Author:
    name: Optional[str]
    contact: Optional[str] = None
    website: Optional[str] = None
    profile_pic: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    _KNOWN = ("name", "fullName", "contact", "website", "profilePic")

    @classmethod
    def from_payload(cls, payload: Any) -> "Author":
        data = _require_dict(payload, "author")
        return cls(
            name=_optional_str(data.get("name") or data.get("fullName")),
            contact=_optional_str(data.get("contact")),
            website=_optional_str(data.get("website")),
            profile_pic=_optional_str(data.get("profilePic")),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN},
        )


@dataclass
class Course:
    id: Identifier
    title: str
    credits: float = 0.0
    image: Optional[str] = None
    author: Optional[Author] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Course":
        data = _require_dict(payload, "course")
        author = data.get("author")
        return cls(
            id=_require_id(data, "id", "course"),
            title=str(data.get("title") or ""),
            credits=_number(data.get("credits"), "credits"),
            image=_optional_str(data.get("image") or data.get("courseImage")),
            author=Author.from_payload(author) if isinstance(author, dict) else None,
        )


@dataclass
class Module:
    id: Identifier
    title: str
    course: Course

    @classmethod
    def from_payload(cls, payload: Any) -> "Module":
        data = _require_dict(payload, "module")
        if not isinstance(data.get("course"), dict):
            raise DataShapeError("module_course_missing", "Module record without its course")
        return cls(
            id=_require_id(data, "id", "module"),
            title=str(data.get("title") or ""),
            course=Course.from_payload(data["course"]),
        )


@dataclass
class Video:
    id: Identifier
    title: str
    play_time_minutes: float
    module: Module

    @classmethod
    def from_payload(cls, payload: Any) -> "Video":
        data = _require_dict(payload, "video")
        if not isinstance(data.get("module"), dict):
            raise DataShapeError("video_module_missing", "Video record without its module")
        return cls(
            id=_require_id(data, "id", "video"),
            title=str(data.get("title") or ""),
            play_time_minutes=_number(data.get("playTimeMinutes"), "play time"),
            module=Module.from_payload(data["module"]),
        )


@dataclass
class Enrollment:
    course_id: Identifier
    learner_id: Optional[str]
    progress: float = 0.0
    title: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Enrollment":
        """Enrollment items are course-like: the course id is `courseId` or `id`."""
        data = _require_dict(payload, "enrollment")
        key = "courseId" if data.get("courseId") is not None else "id"
        return cls(
            course_id=_require_id(data, key, "enrollment"),
            learner_id=_optional_str(data.get("learnerId")),
            progress=_number(data.get("progress"), "progress"),
            title=_optional_str(data.get("title")),
        )


__all__ = [
    "Identifier",
    "course_key",
    "Author",
    "Course",
    "Module",
    "Video",
    "Enrollment",
    "decode_list",
]
