from __future__ import annotations


class SignTrainerError(Exception):
    """Base class for errors raised by signtrainer."""


class CourseNotFound(SignTrainerError, KeyError):
    """Raised when a command references a course id that is not in the catalog."""

    def __init__(self, course_id: object) -> None:
        super().__init__(course_id)
        self.course_id = course_id

    def __str__(self) -> str:
        return f"Unknown course {self.course_id!r}"


class CameraAccessDenied(SignTrainerError):
    """The camera could not be opened (missing device or no permission)."""


class DetectorInitFailure(SignTrainerError):
    """The hand detector backend could not be initialized."""
