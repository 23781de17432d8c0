from .config import DetectorOptions, TrainingConfig
from .courses import CourseCatalog
from .errors import CameraAccessDenied, CourseNotFound, DetectorInitFailure, SignTrainerError
from .progress import ProgressSummary, ProgressTracker
from .session import SessionController
from .timers import TimerHandle, TimerScheduler
from .types import Course, DetectionResult, SessionSnapshot, SessionState

__all__ = [
    "CameraAccessDenied",
    "Course",
    "CourseCatalog",
    "CourseNotFound",
    "DetectionResult",
    "DetectorInitFailure",
    "DetectorOptions",
    "ProgressSummary",
    "ProgressTracker",
    "SessionController",
    "SessionSnapshot",
    "SessionState",
    "SignTrainerError",
    "TimerHandle",
    "TimerScheduler",
    "TrainingConfig",
]
