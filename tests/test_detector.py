from types import SimpleNamespace

import numpy as np
import pytest

from signtrainer import detector as detector_module
from signtrainer.config import DetectorOptions
from signtrainer.detector import HandPresenceDetector, _SolutionsBackend
from signtrainer.errors import DetectorInitFailure


class FakeHands:
    def __init__(self) -> None:
        self.present = False
        self.closed = 0

    def process(self, frame_rgb):
        if not self.present:
            return SimpleNamespace(multi_hand_landmarks=None, multi_handedness=None)
        return SimpleNamespace(
            multi_hand_landmarks=[object()],
            multi_handedness=[SimpleNamespace(classification=[SimpleNamespace(label="Right", score=0.93)])],
        )

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def hands(monkeypatch) -> FakeHands:
    fake = FakeHands()
    monkeypatch.setattr(
        detector_module, "_try_create_solutions_backend", lambda options: _SolutionsBackend(mp=None, hands=fake)
    )
    return fake


def _frame() -> np.ndarray:
    return np.zeros((48, 64, 3), dtype=np.uint8)


def test_send_pushes_presence_to_callback(hands) -> None:
    received = []
    detector = HandPresenceDetector()
    assert detector.send(_frame()) is None

    detector.initialize(received.append)
    assert detector.initialized
    result = detector.send(_frame())
    assert result.hand_present is False

    hands.present = True
    result = detector.send(_frame())
    assert result.hand_present is True
    assert result.confidence == pytest.approx(0.93)
    assert [r.hand_present for r in received] == [False, True]


def test_close_is_idempotent(hands) -> None:
    with HandPresenceDetector() as detector:
        detector.initialize(lambda result: None)
    detector.close()
    assert hands.closed == 1
    assert not detector.initialized
    assert detector.send(_frame()) is None


def test_missing_mediapipe_is_an_init_failure(monkeypatch) -> None:
    def boom(options):
        raise ImportError("No module named 'mediapipe'")

    monkeypatch.setattr(detector_module, "_try_create_solutions_backend", boom)
    with pytest.raises(DetectorInitFailure):
        HandPresenceDetector().initialize(lambda result: None)


def test_tasks_fallback_without_model_is_an_init_failure(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(detector_module, "_try_create_solutions_backend", lambda options: None)
    options = DetectorOptions(tasks_model_path=str(tmp_path / "missing.task"))
    with pytest.raises(DetectorInitFailure):
        HandPresenceDetector(options).initialize(lambda result: None)
