from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from signtrainer.config import TrainingConfig  # noqa: E402
from signtrainer.courses import CourseCatalog  # noqa: E402
from signtrainer.errors import CameraAccessDenied, DetectorInitFailure  # noqa: E402
from signtrainer.progress import ProgressTracker  # noqa: E402
from signtrainer.session import SessionController  # noqa: E402
from signtrainer.timers import TimerScheduler  # noqa: E402
from signtrainer.types import DetectionResult  # noqa: E402


class ManualClock:
    """Clock the tests move by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeCamera:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.is_open = False
        self.acquired = 0
        self.released = 0

    def acquire(self):
        self.acquired += 1
        if self.fail:
            raise CameraAccessDenied("camera blocked")
        self.is_open = True
        return self

    def read(self):
        return "frame" if self.is_open else None

    def release(self) -> None:
        self.released += 1
        self.is_open = False


class FakeDetector:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.on_result: Optional[Callable[[DetectionResult], None]] = None
        self.closed = 0

    @property
    def ready(self) -> bool:
        return self.on_result is not None

    def initialize(self, on_result) -> None:
        if self.fail:
            raise DetectorInitFailure("no model")
        self.on_result = on_result

    def send(self, present) -> Optional[DetectionResult]:
        if self.on_result is None:
            return None
        result = DetectionResult(hand_present=bool(present))
        self.on_result(result)
        return result

    def close(self) -> None:
        self.closed += 1
        self.on_result = None


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def catalog() -> CourseCatalog:
    return CourseCatalog.default()


@pytest.fixture
def progress(catalog: CourseCatalog) -> ProgressTracker:
    return ProgressTracker(catalog)


@pytest.fixture
def camera() -> FakeCamera:
    return FakeCamera()


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector()


@pytest.fixture
def make_controller(clock, catalog, progress, camera, detector):
    def factory(config: Optional[TrainingConfig] = None) -> SessionController:
        return SessionController(
            catalog,
            progress,
            camera,
            detector,
            scheduler=TimerScheduler(clock),
            config=config or TrainingConfig(),
        )

    return factory


@pytest.fixture
def controller(make_controller) -> SessionController:
    return make_controller()
