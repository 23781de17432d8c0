from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from .timers import TimerHandle


@dataclass(frozen=True)
class Course:
    """A gesture-training unit: one hand sign practised until `goal` is reached."""

    id: str
    instruction: str
    goal: int


@dataclass(frozen=True)
class DetectionResult:
    """Per-frame output of the hand detector."""

    hand_present: bool
    confidence: Optional[float] = None  # handedness score of the best hand, if any


class SessionState(Enum):
    IDLE = "idle"
    AWAITING_COURSE_SELECTION = "awaiting_course_selection"
    INITIALIZING = "initializing"
    DETECTING = "detecting"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"
    CAMERA_ERROR = "camera_error"


# States in which the camera and detector are held.
ACTIVE_STATES = frozenset({SessionState.INITIALIZING, SessionState.DETECTING, SessionState.PAUSED})
TERMINAL_STATES = frozenset({SessionState.COMPLETED, SessionState.FAILED, SessionState.CAMERA_ERROR})


class SessionEventKind(Enum):
    GESTURE_ACCEPTED = "gesture_accepted"
    GESTURE_IN_PROGRESS = "gesture_in_progress"  # display only
    HAND_MISSING = "hand_missing"  # display only
    GOAL_REACHED = "goal_reached"
    NO_HAND_TIMEOUT = "no_hand_timeout"


@dataclass(frozen=True)
class SessionEvent:
    kind: SessionEventKind
    at: float


@dataclass(frozen=True)
class TrainingSession:
    """
    State of one active or just-finished training attempt.

    Never mutated in place; the controller replaces it with the result of a
    transition function.
    """

    course_id: Optional[str] = None
    state: SessionState = SessionState.IDLE
    correct_count: int = 0
    total_count: int = 0
    # Bumped on every (re)start; timers carry the generation they were armed in.
    generation: int = 0
    # Scoring timestamps (seconds on the controller clock). None = nothing scored yet.
    last_event_at: Optional[float] = None
    last_accepted_at: Optional[float] = None
    suppression_deadline: Optional[float] = None
    no_hand_timer: Optional[TimerHandle] = None
    hand_detected: bool = False
    status: Optional[str] = None
    feedback_until: Optional[float] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to the display layer after every event."""

    state: SessionState
    course_id: Optional[str]
    instruction: Optional[str]
    correct_count: int
    total_count: int
    goal: int
    goal_reached: bool
    hand_detected: bool
    status: Optional[str]
    feedback: Optional[str]
    error: Optional[str]
    progress_percent: int
    accuracy_percent: int
    missed_count: int


ResultCallback = Callable[[DetectionResult], None]


class Camera(Protocol):
    def acquire(self) -> Any:
        """Open the device; raises CameraAccessDenied."""

    def read(self) -> Optional[Any]:
        """Return the next frame, or None when no frame is available."""

    def release(self) -> None:
        """Close the device. Idempotent and safe without a prior acquire."""


class Detector(Protocol):
    def initialize(self, on_result: ResultCallback) -> None:
        """Load the backend; raises DetectorInitFailure."""

    def send(self, frame: Any) -> Optional[DetectionResult]:
        """Run detection on one frame and push the result to `on_result`."""

    def close(self) -> None:
        """Release the backend. Idempotent."""
