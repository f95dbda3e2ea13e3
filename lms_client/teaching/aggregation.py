"""
Rebuild the Course -> Module -> Video tree from a flat video list.

The backend only returns videos for a course; each video embeds its module and
the module embeds its course. Modules and the course are derived here.

Rules:
    - Single pass over the input.
    - A module appears once, at the position of its first video.
    - Videos are grouped per module id in input order.
    - Every video of one batch must sit in the same course; a mixed batch
      is rejected.
    - Pure and deterministic: same input, same tree.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import DataShapeError
from ..models import Course, Identifier, Module, Video, course_key


@dataclass(frozen=True)
class CourseTree:
    modules: Tuple[Module, ...]
    videos_by_module: Dict[Identifier, Tuple[Video, ...]]
    course: Optional[Course] = None

    def videos_for(self, module_id: Identifier) -> Tuple[Video, ...]:
        return self.videos_by_module.get(module_id, ())

    @property
    def total_play_time_minutes(self) -> float:
        return sum(v.play_time_minutes for videos in self.videos_by_module.values() for v in videos)


def aggregate(videos: Iterable[Video]) -> CourseTree:
    modules: List[Module] = []
    grouped: Dict[Identifier, List[Video]] = {}
    course: Optional[Course] = None

    for video in videos:
        module = video.module
        if course is None:
            course = module.course
        elif course_key(module.course.id) != course_key(course.id):
            raise DataShapeError(
                "mixed_course_batch",
                f"Videos span more than one course ({course.id!r}, {module.course.id!r})",
            )
        if module.id not in grouped:
            modules.append(module)
            grouped[module.id] = []
        grouped[module.id].append(video)

    return CourseTree(
        modules=tuple(modules),
        videos_by_module={module_id: tuple(items) for module_id, items in grouped.items()},
        course=course,
    )


__all__ = ["CourseTree", "aggregate"]
