"""
Configuration constants for signtrainer.

Timing rules for scoring gestures, the course goal, and the options handed to
the camera and hand detector collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


# Course goal
GESTURES_GOAL: Final[int] = 20

# Scoring timings (seconds)
RECOGNITION_COOLDOWN_S: Final[float] = 2.0  # min spacing between accepted gestures
SUPPRESSION_WINDOW_S: Final[float] = 6.0  # frames after a scored one are shown, not scored
NO_HAND_TIMEOUT_S: Final[float] = 3.0  # continuous absence before the session fails
FEEDBACK_DURATION_S: Final[float] = 2.0  # how long "Correct gesture!" stays visible

# MediaPipe configuration
MEDIAPIPE_MAX_NUM_HANDS: Final[int] = 1
MEDIAPIPE_MODEL_COMPLEXITY: Final[int] = 1
MEDIAPIPE_MIN_DETECTION_CONFIDENCE: Final[float] = 0.5
MEDIAPIPE_MIN_TRACKING_CONFIDENCE: Final[float] = 0.5
TASKS_MODEL_PATH: Final[str] = "models/hand_landmarker.task"

# Camera configuration
DEFAULT_CAMERA_INDEX: Final[int] = 0
CAMERA_WIDTH: Final[int] = 1280
CAMERA_HEIGHT: Final[int] = 720

# Logging
LOGGER_NAME: Final[str] = "signtrainer"


@dataclass(frozen=True)
class TrainingConfig:
    """Timing rules applied by the detection event processor and controller."""

    goal: int = GESTURES_GOAL
    recognition_cooldown_s: float = RECOGNITION_COOLDOWN_S
    suppression_window_s: float = SUPPRESSION_WINDOW_S
    no_hand_timeout_s: float = NO_HAND_TIMEOUT_S
    feedback_duration_s: float = FEEDBACK_DURATION_S

    def __post_init__(self) -> None:
        if self.goal <= 0:
            raise ValueError(f"goal must be positive, got {self.goal}")
        for name in ("recognition_cooldown_s", "suppression_window_s", "no_hand_timeout_s", "feedback_duration_s"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True)
class DetectorOptions:
    """Options passed to the MediaPipe hand detector."""

    max_num_hands: int = MEDIAPIPE_MAX_NUM_HANDS
    model_complexity: int = MEDIAPIPE_MODEL_COMPLEXITY
    min_detection_confidence: float = MEDIAPIPE_MIN_DETECTION_CONFIDENCE
    min_tracking_confidence: float = MEDIAPIPE_MIN_TRACKING_CONFIDENCE
    tasks_model_path: str = TASKS_MODEL_PATH


DEFAULT_TRAINING_CONFIG = TrainingConfig()
