from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .config import GESTURES_GOAL
from .errors import CourseNotFound
from .types import Course


# Vowel hand signs: (id, instruction)
VOWEL_COURSES: List[Tuple[str, str]] = [
    ("A", "Close your fingers and show your thumb."),
    ("E", "Bend your fingers and bring them to your little finger."),
    ("I", "Close all fingers except the little finger."),
    ("O", "Form a circle with all your fingers."),
    ("U", "Raise your index and little fingers."),
]


class CourseCatalog:
    """
    Static registry of gesture courses, in insertion order.

    Immutable once built; `get` raises `CourseNotFound` for unknown ids.
    """

    def __init__(self, courses: Iterable[Course]) -> None:
        by_id: Dict[str, Course] = {}
        for course in courses:
            if course.id in by_id:
                raise ValueError(f"Duplicate course id {course.id!r}")
            if course.goal <= 0:
                raise ValueError(f"Course {course.id!r} has non-positive goal {course.goal}")
            by_id[course.id] = course
        self._courses: Mapping[str, Course] = MappingProxyType(by_id)

    @classmethod
    def default(cls, goal: int = GESTURES_GOAL) -> "CourseCatalog":
        """The five built-in vowel courses A, E, I, O, U."""
        return cls(Course(id=cid, instruction=text, goal=goal) for cid, text in VOWEL_COURSES)

    def list(self) -> List[Course]:
        return list(self._courses.values())

    def ids(self) -> List[str]:
        return list(self._courses.keys())

    def get(self, course_id: Optional[str]) -> Course:
        try:
            return self._courses[course_id]  # type: ignore[index]
        except (KeyError, TypeError):
            raise CourseNotFound(course_id) from None

    def __contains__(self, course_id: object) -> bool:
        return course_id in self._courses

    def __iter__(self) -> Iterator[Course]:
        return iter(self._courses.values())

    def __len__(self) -> int:
        return len(self._courses)
