from signtrainer.config import TrainingConfig
from signtrainer.processor import STATUS_IN_PROGRESS, STATUS_NO_HAND, DetectionEventProcessor
from signtrainer.timers import TimerScheduler
from signtrainer.types import DetectionResult, SessionEventKind, SessionState, TrainingSession

HAND = DetectionResult(hand_present=True)
NO_HAND = DetectionResult(hand_present=False)


def _session() -> TrainingSession:
    return TrainingSession(course_id="A", state=SessionState.DETECTING, generation=1)


def _kinds(events):
    return [event.kind for event in events]


def test_first_hand_frame_is_accepted(clock) -> None:
    processor = DetectionEventProcessor(TimerScheduler(clock))
    session, events = processor.process(_session(), HAND, 0.0, lambda: None)
    assert _kinds(events) == [SessionEventKind.GESTURE_ACCEPTED, SessionEventKind.GESTURE_IN_PROGRESS]
    assert session.last_event_at == 0.0
    assert session.last_accepted_at == 0.0
    assert session.suppression_deadline == 6.0
    assert session.status == STATUS_IN_PROGRESS
    assert session.hand_detected is True


def test_frames_inside_suppression_window_are_not_scored(clock) -> None:
    scheduler = TimerScheduler(clock)
    processor = DetectionEventProcessor(scheduler)
    session, _ = processor.process(_session(), HAND, 0.0, lambda: None)

    session, events = processor.process(session, HAND, 5.9, lambda: None)
    assert events == []
    session, events = processor.process(session, NO_HAND, 5.95, lambda: None)
    assert events == []
    assert session.hand_detected is False
    assert session.last_event_at == 0.0
    assert scheduler.pending_count() == 0

    session, events = processor.process(session, HAND, 6.0, lambda: None)
    assert SessionEventKind.GESTURE_ACCEPTED in _kinds(events)


def test_cooldown_limits_accepted_gestures(clock) -> None:
    config = TrainingConfig(suppression_window_s=0.5, recognition_cooldown_s=2.0)
    processor = DetectionEventProcessor(TimerScheduler(clock), config)
    session, events = processor.process(_session(), HAND, 0.0, lambda: None)
    assert SessionEventKind.GESTURE_ACCEPTED in _kinds(events)

    session, events = processor.process(session, HAND, 1.0, lambda: None)
    assert _kinds(events) == [SessionEventKind.GESTURE_IN_PROGRESS]
    assert session.last_event_at == 1.0
    assert session.last_accepted_at == 0.0

    session, events = processor.process(session, HAND, 2.0, lambda: None)
    assert SessionEventKind.GESTURE_ACCEPTED in _kinds(events)


def test_missing_hand_arms_one_timer(clock) -> None:
    config = TrainingConfig(suppression_window_s=0.0)
    scheduler = TimerScheduler(clock)
    processor = DetectionEventProcessor(scheduler, config)
    fired = []

    session, events = processor.process(_session(), NO_HAND, 0.0, lambda event: fired.append(event.kind))
    assert _kinds(events) == [SessionEventKind.HAND_MISSING]
    assert session.status == STATUS_NO_HAND
    timer = session.no_hand_timer
    assert timer is not None and timer.pending

    clock.advance(1.0)
    session, _ = processor.process(session, NO_HAND, 1.0, lambda event: fired.append("second timer"))
    assert session.no_hand_timer is timer
    assert scheduler.pending_count() == 1

    clock.advance(2.0)
    scheduler.run_due()
    assert fired == [SessionEventKind.NO_HAND_TIMEOUT]


def test_hand_cancels_pending_timer(clock) -> None:
    config = TrainingConfig(suppression_window_s=0.5)
    scheduler = TimerScheduler(clock)
    processor = DetectionEventProcessor(scheduler, config)
    fired = []

    session, _ = processor.process(_session(), NO_HAND, 0.0, lambda event: fired.append(event))
    timer = session.no_hand_timer
    clock.advance(1.0)
    session, events = processor.process(session, HAND, 1.0, lambda: None)

    assert timer.cancelled
    assert session.no_hand_timer is None
    assert SessionEventKind.HAND_MISSING not in _kinds(events)
    clock.advance(10.0)
    scheduler.run_due()
    assert fired == []


def test_processor_does_not_mutate_input(clock) -> None:
    processor = DetectionEventProcessor(TimerScheduler(clock))
    original = _session()
    processor.process(original, HAND, 0.0, lambda: None)
    assert original.last_event_at is None
    assert original.status is None
