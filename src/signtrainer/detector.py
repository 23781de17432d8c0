from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

import cv2

from .config import DetectorOptions
from .errors import DetectorInitFailure
from .logger import get_logger
from .types import DetectionResult, ResultCallback

logger = get_logger("detector")

HAND_LANDMARKER_TASK_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/latest/hand_landmarker.task"
)


@dataclass(frozen=True)
class _SolutionsBackend:
    mp: object
    hands: object


@dataclass(frozen=True)
class _TasksBackend:
    mp: object
    landmarker: object


def _try_create_solutions_backend(options: DetectorOptions) -> Optional[_SolutionsBackend]:
    import mediapipe as mp  # type: ignore

    if not hasattr(mp, "solutions"):
        return None
    hands = mp.solutions.hands.Hands(
        static_image_mode=False,
        max_num_hands=options.max_num_hands,
        model_complexity=options.model_complexity,
        min_detection_confidence=options.min_detection_confidence,
        min_tracking_confidence=options.min_tracking_confidence,
    )
    return _SolutionsBackend(mp=mp, hands=hands)


def _try_create_tasks_backend(options: DetectorOptions) -> _TasksBackend:
    """
    Fallback for MediaPipe distributions that do not include `mp.solutions`.

    Uses the MediaPipe Tasks HandLandmarker API, which requires a `.task` model asset on disk.
    """

    import mediapipe as mp  # type: ignore

    # Import locations can differ slightly across builds.
    try:
        from mediapipe.tasks.python import BaseOptions  # type: ignore
        from mediapipe.tasks.python.vision import HandLandmarker, HandLandmarkerOptions, RunningMode  # type: ignore
    except ImportError:  # pragma: no cover
        from mediapipe.tasks import python as mp_python  # type: ignore

        BaseOptions = mp_python.BaseOptions
        vision = mp_python.vision
        HandLandmarker = vision.HandLandmarker
        HandLandmarkerOptions = vision.HandLandmarkerOptions
        RunningMode = vision.RunningMode

    if not os.path.exists(options.tasks_model_path):
        raise FileNotFoundError(options.tasks_model_path)

    landmarker = HandLandmarker.create_from_options(
        HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=options.tasks_model_path),
            running_mode=RunningMode.VIDEO,
            num_hands=options.max_num_hands,
            min_hand_detection_confidence=options.min_detection_confidence,
            min_tracking_confidence=options.min_tracking_confidence,
        )
    )
    return _TasksBackend(mp=mp, landmarker=landmarker)


def _best_score(scores: List[float]) -> Optional[float]:
    return max(scores) if scores else None


class HandPresenceDetector:
    """
    Per-frame hand presence using MediaPipe Hands.

    Input frames are expected as **BGR** images (OpenCV default). Results are
    pushed to the callback given to `initialize`, the way MediaPipe's
    `onResults` hook works in the browser.
    """

    def __init__(self, options: Optional[DetectorOptions] = None) -> None:
        self.options = options or DetectorOptions()
        self._solutions: Optional[_SolutionsBackend] = None
        self._tasks: Optional[_TasksBackend] = None
        self._tasks_timestamp_ms = 0
        self._on_result: Optional[ResultCallback] = None

    @property
    def initialized(self) -> bool:
        return self._solutions is not None or self._tasks is not None

    def initialize(self, on_result: ResultCallback) -> None:
        self._on_result = on_result
        if self.initialized:
            return

        try:
            self._solutions = _try_create_solutions_backend(self.options)
        except ImportError as e:
            raise DetectorInitFailure(f"MediaPipe is not installed: {e}") from e
        except Exception as e:  # pragma: no cover
            raise DetectorInitFailure(f"Could not initialize MediaPipe Hands: {e}") from e

        if self._solutions is None:
            try:
                self._tasks = _try_create_tasks_backend(self.options)
            except FileNotFoundError as e:
                raise DetectorInitFailure(
                    "MediaPipe does not provide `mp.solutions` in your environment, so the Tasks\n"
                    "HandLandmarker fallback is used, which needs a model file on disk:\n"
                    f"  {self.options.tasks_model_path}\n\n"
                    "Download it with:\n"
                    f'  curl -L -o "{self.options.tasks_model_path}" "{HAND_LANDMARKER_TASK_URL}"'
                ) from e
            except Exception as e:  # pragma: no cover
                raise DetectorInitFailure(f"Could not initialize MediaPipe Hands: {e}") from e

        logger.info("Hand detector ready (%s backend)", "solutions" if self._solutions else "tasks")

    def close(self) -> None:
        if self._solutions is not None:
            self._solutions.hands.close()
            self._solutions = None
        if self._tasks is not None:
            try:
                self._tasks.landmarker.close()
            except Exception:
                logger.debug("HandLandmarker close failed", exc_info=True)
            self._tasks = None
        self._on_result = None

    def __enter__(self) -> "HandPresenceDetector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def send(self, frame_bgr) -> Optional[DetectionResult]:
        """Detect on one frame and push the result; returns None when not initialized."""
        if not self.initialized:
            return None
        result = self.detect(frame_bgr)
        if self._on_result is not None:
            self._on_result(result)
        return result

    def detect(self, frame_bgr) -> DetectionResult:
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        if self._solutions is not None:
            results = self._solutions.hands.process(frame_rgb)
            if not results.multi_hand_landmarks:
                return DetectionResult(hand_present=False)
            scores = [
                float(getattr(h.classification[0], "score", 0.0))
                for h in (results.multi_handedness or [])
                if h.classification
            ]
            return DetectionResult(hand_present=True, confidence=_best_score(scores))

        if self._tasks is None:
            return DetectionResult(hand_present=False)

        mp = self._tasks.mp
        if not hasattr(mp, "Image") or not hasattr(mp, "ImageFormat"):
            raise RuntimeError("Your MediaPipe build does not expose `mp.Image` required for the Tasks API.")
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)

        # Tasks VIDEO mode requires monotonically increasing timestamps.
        self._tasks_timestamp_ms += 33
        result = self._tasks.landmarker.detect_for_video(mp_image, self._tasks_timestamp_ms)

        if not (getattr(result, "hand_landmarks", None) or []):
            return DetectionResult(hand_present=False)
        scores = [float(getattr(cats[0], "score", 0.0)) for cats in (getattr(result, "handedness", None) or []) if cats]
        return DetectionResult(hand_present=True, confidence=_best_score(scores))
