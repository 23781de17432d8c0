import pytest

from signtrainer.errors import CourseNotFound
from signtrainer.progress import ProgressSummary, ProgressTracker


def test_starts_at_zero_for_every_course(progress: ProgressTracker) -> None:
    assert progress.as_dict() == {"A": 0, "E": 0, "I": 0, "O": 0, "U": 0}


def test_record_success_overwrites_previous_value(progress: ProgressTracker) -> None:
    assert progress.record_success("A", 15) == 15
    assert progress.record_success("A", 4) == 4
    assert progress.get("A") == 4


def test_record_success_clamps_to_goal(progress: ProgressTracker) -> None:
    assert progress.record_success("E", 25) == 20
    assert progress.record_success("I", -3) == 0


def test_unknown_course_raises(progress: ProgressTracker) -> None:
    with pytest.raises(CourseNotFound):
        progress.get("Z")
    with pytest.raises(CourseNotFound):
        progress.record_success("Z", 1)


def test_summary_counts_completed_and_in_progress(progress: ProgressTracker) -> None:
    assert progress.summary() == ProgressSummary(completed=0, in_progress=0, overall_percent=0)
    progress.record_success("A", 20)
    progress.record_success("E", 10)
    summary = progress.summary()
    assert summary.completed == 1
    assert summary.in_progress == 1
    assert summary.overall_percent == 30


def test_reset_clears_all(progress: ProgressTracker) -> None:
    progress.record_success("U", 7)
    progress.reset()
    assert progress.get("U") == 0
