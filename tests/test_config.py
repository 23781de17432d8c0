import pytest

from signtrainer.config import DEFAULT_TRAINING_CONFIG, DetectorOptions, TrainingConfig


def test_defaults_match_training_rules() -> None:
    config = DEFAULT_TRAINING_CONFIG
    assert config.goal == 20
    assert config.recognition_cooldown_s == 2.0
    assert config.suppression_window_s == 6.0
    assert config.no_hand_timeout_s == 3.0
    assert config.feedback_duration_s == 2.0


def test_detector_defaults_track_one_hand() -> None:
    options = DetectorOptions()
    assert options.max_num_hands == 1
    assert options.model_complexity == 1
    assert options.min_detection_confidence == 0.5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"goal": 0},
        {"recognition_cooldown_s": -1.0},
        {"suppression_window_s": -0.1},
        {"no_hand_timeout_s": -3.0},
    ],
)
def test_invalid_values_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        TrainingConfig(**kwargs)
