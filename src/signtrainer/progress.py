"""In-memory record of correct gestures per course for the lifetime of the process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .courses import CourseCatalog
from .logger import get_logger

logger = get_logger("progress")


@dataclass(frozen=True)
class ProgressSummary:
    """Totals shown on the main menu."""

    completed: int  # courses at their goal
    in_progress: int  # courses with some progress but below goal
    overall_percent: int


class ProgressTracker:
    """Maps course id to the correct-gesture count of its last successful session."""

    def __init__(self, catalog: CourseCatalog) -> None:
        self.catalog = catalog
        self._counts: Dict[str, int] = {course.id: 0 for course in catalog}

    def get(self, course_id: str) -> int:
        """Return stored progress; raises CourseNotFound for unknown ids."""
        self.catalog.get(course_id)
        return self._counts[course_id]

    def record_success(self, course_id: str, correct_count: int) -> int:
        """
        Store the result of a completed session, replacing the previous value.

        The value is clamped to `[0, goal]`. Returns the stored value.
        """
        course = self.catalog.get(course_id)
        value = max(0, min(course.goal, int(correct_count)))
        previous = self._counts[course_id]
        self._counts[course_id] = value
        logger.info("Progress for course %s: %d -> %d/%d", course_id, previous, value, course.goal)
        return value

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def reset(self) -> None:
        for course_id in self._counts:
            self._counts[course_id] = 0

    def summary(self) -> ProgressSummary:
        completed = 0
        in_progress = 0
        done = 0
        total_goal = 0
        for course in self.catalog:
            value = self._counts[course.id]
            if value >= course.goal:
                completed += 1
            elif value > 0:
                in_progress += 1
            done += value
            total_goal += course.goal
        overall = int(round(done / total_goal * 100)) if total_goal else 0
        return ProgressSummary(completed=completed, in_progress=in_progress, overall_percent=overall)
