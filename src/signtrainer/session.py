"""
Training-session controller.

Owns the single `TrainingSession`, drives it through

    IDLE -> AWAITING_COURSE_SELECTION -> INITIALIZING -> DETECTING <-> PAUSED
         -> COMPLETED | FAILED | CAMERA_ERROR

and holds the camera and detector only while the session is INITIALIZING,
DETECTING or PAUSED. Collaborators (catalog, progress, camera, detector,
scheduler) are injected so the whole state machine runs without a webcam.
"""

from __future__ import annotations

import dataclasses
from functools import partial
from typing import Callable, List, Optional

from .config import DEFAULT_TRAINING_CONFIG, TrainingConfig
from .courses import CourseCatalog
from .errors import CameraAccessDenied, CourseNotFound, DetectorInitFailure
from .logger import get_logger
from .processor import DetectionEventProcessor
from .progress import ProgressTracker
from .timers import TimerScheduler
from .types import (
    ACTIVE_STATES,
    TERMINAL_STATES,
    Camera,
    DetectionResult,
    Detector,
    SessionEvent,
    SessionEventKind,
    SessionSnapshot,
    SessionState,
    TrainingSession,
)

logger = get_logger("session")

FEEDBACK_CORRECT = "Correct gesture!"

SnapshotListener = Callable[[SessionSnapshot], None]
EventListener = Callable[[SessionEvent], None]


# --- Pure transitions ---


def new_session(course_id: str, correct_count: int, generation: int) -> TrainingSession:
    return TrainingSession(
        course_id=course_id,
        state=SessionState.INITIALIZING,
        correct_count=correct_count,
        total_count=0,
        generation=generation,
    )


def apply_event(session: TrainingSession, event: SessionEvent, config: TrainingConfig, goal: int) -> TrainingSession:
    """Fold one processor event into the session counts."""
    if event.kind is SessionEventKind.GESTURE_ACCEPTED:
        return dataclasses.replace(
            session,
            total_count=session.total_count + 1,
            correct_count=min(session.correct_count + 1, goal),
            feedback_until=event.at + config.feedback_duration_s,
        )
    if event.kind is SessionEventKind.GOAL_REACHED:
        return dataclasses.replace(session, status=None)
    return session


def with_state(session: TrainingSession, state: SessionState, **changes) -> TrainingSession:
    return dataclasses.replace(session, state=state, **changes)


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return max(0, min(100, int(round(part / whole * 100))))


def _add_listener(listeners: list, listener) -> Callable[[], None]:
    listeners.append(listener)

    def remove() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return remove


class SessionController:
    """
    Runs one training session at a time.

    Commands (`start`, `pause`, `resume`, `stop`, `retry`, `go_back`) return
    the resulting snapshot; subscribed listeners get the same snapshot after
    every command and every detection result. Collaborator failures end in
    the CAMERA_ERROR state rather than raising.
    """

    def __init__(
        self,
        catalog: CourseCatalog,
        progress: ProgressTracker,
        camera: Camera,
        detector: Detector,
        scheduler: Optional[TimerScheduler] = None,
        config: TrainingConfig = DEFAULT_TRAINING_CONFIG,
    ) -> None:
        self.catalog = catalog
        self.progress = progress
        self.camera = camera
        self.detector = detector
        self.scheduler = scheduler if scheduler is not None else TimerScheduler()
        self.config = config
        self.processor = DetectionEventProcessor(self.scheduler, config)

        self.session: Optional[TrainingSession] = None
        self._menu_state = SessionState.IDLE
        self._command_error: Optional[str] = None
        self._generation = 0
        self._holding_resources = False
        self._listeners: List[SnapshotListener] = []
        self._event_listeners: List[EventListener] = []

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- Queries ---

    @property
    def state(self) -> SessionState:
        if self.session is None:
            return self._menu_state
        return self.session.state

    @property
    def holding_resources(self) -> bool:
        return self._holding_resources

    def goal_for(self, course_id: Optional[str]) -> int:
        if course_id is not None and course_id in self.catalog:
            return self.catalog.get(course_id).goal
        return self.config.goal

    def snapshot(self, now: Optional[float] = None) -> SessionSnapshot:
        if now is None:
            now = self.scheduler.now()
        session = self.session
        if session is None:
            return SessionSnapshot(
                state=self._menu_state,
                course_id=None,
                instruction=None,
                correct_count=0,
                total_count=0,
                goal=self.config.goal,
                goal_reached=False,
                hand_detected=False,
                status=None,
                feedback=None,
                error=self._command_error,
                progress_percent=0,
                accuracy_percent=0,
                missed_count=0,
            )

        goal = self.goal_for(session.course_id)
        instruction = self.catalog.get(session.course_id).instruction if session.course_id in self.catalog else None
        feedback = None
        if session.feedback_until is not None and now < session.feedback_until:
            feedback = FEEDBACK_CORRECT
        return SessionSnapshot(
            state=session.state,
            course_id=session.course_id,
            instruction=instruction,
            correct_count=session.correct_count,
            total_count=session.total_count,
            goal=goal,
            goal_reached=session.correct_count >= goal,
            hand_detected=session.hand_detected,
            status=session.status,
            feedback=feedback,
            error=session.error or self._command_error,
            progress_percent=percent(session.correct_count, goal) if session.total_count > 0 else 0,
            accuracy_percent=percent(session.correct_count, session.total_count),
            missed_count=max(0, session.total_count - session.correct_count),
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener; returns a function that removes it."""
        return _add_listener(self._listeners, listener)

    def subscribe_events(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener for every session event, display-only ones included."""
        return _add_listener(self._event_listeners, listener)

    # --- Commands ---

    def start(self, course_id: Optional[str] = None) -> SessionSnapshot:
        """Start training `course_id`, or open course selection when no course is given."""
        self._command_error = None
        if course_id is None:
            self._discard_session()
            self._menu_state = SessionState.AWAITING_COURSE_SELECTION
            logger.info("Awaiting course selection")
            return self._notify()

        try:
            self.catalog.get(course_id)
        except CourseNotFound as e:
            self._command_error = str(e)
            logger.warning("Cannot start training: %s", e)
            return self._notify()

        return self._begin(course_id, self.progress.get(course_id))

    def pause(self) -> SessionSnapshot:
        if self.session is None or self.session.state is not SessionState.DETECTING:
            logger.debug("pause() ignored in state %s", self.state.name)
            return self.snapshot()
        self._cancel_timers()
        self.session = with_state(self.session, SessionState.PAUSED)
        logger.info("Session paused")
        return self._notify()

    def resume(self) -> SessionSnapshot:
        if self.session is None or self.session.state is not SessionState.PAUSED:
            logger.debug("resume() ignored in state %s", self.state.name)
            return self.snapshot()
        self.session = with_state(self.session, SessionState.DETECTING)
        logger.info("Session resumed")
        return self._notify()

    def toggle_pause(self) -> SessionSnapshot:
        if self.state is SessionState.PAUSED:
            return self.resume()
        return self.pause()

    def stop(self, success: bool) -> SessionSnapshot:
        """End the running session as completed (`success`) or failed."""
        if self.session is None or self.session.state not in ACTIVE_STATES:
            logger.debug("stop(%s) ignored in state %s", success, self.state.name)
            return self.snapshot()
        self._finish(success)
        return self._notify()

    def retry(self) -> SessionSnapshot:
        """Restart the current course from zero."""
        session = self.session
        if session is None or session.course_id is None:
            logger.debug("retry() ignored: no course")
            return self.snapshot()
        if session.state not in TERMINAL_STATES and session.state not in ACTIVE_STATES:
            logger.debug("retry() ignored in state %s", session.state.name)
            return self.snapshot()
        self._command_error = None
        logger.info("Retrying course %s", session.course_id)
        return self._begin(session.course_id, 0)

    def go_back(self) -> SessionSnapshot:
        """Cancel whatever is running and return to the main menu."""
        self._discard_session()
        self._menu_state = SessionState.IDLE
        self._command_error = None
        logger.info("Back to main menu")
        return self._notify()

    def close(self) -> None:
        """External teardown: release everything without notifying listeners."""
        self._discard_session()
        self.scheduler.cancel_all()
        self._menu_state = SessionState.IDLE

    # --- Event sources ---

    def handle_detection(self, result: DetectionResult) -> None:
        """Push callback for the detector: score one frame."""
        session = self.session
        if session is None or session.state is not SessionState.DETECTING:
            return

        now = self.scheduler.now()
        on_timeout = partial(self._on_no_hand_timeout, session.generation)
        session, events = self.processor.process(session, result, now, on_timeout)
        self.session = session
        self._apply_events(events)
        self._notify(now)

    def poll(self, now: Optional[float] = None) -> int:
        """Fire due timers. Call once per frame from the host loop."""
        return self.scheduler.run_due(now)

    # --- Internals ---

    def _begin(self, course_id: str, correct_count: int) -> SessionSnapshot:
        self._discard_session()
        self._generation += 1
        self.session = new_session(course_id, correct_count, self._generation)
        logger.info("Starting course %s at %d/%d", course_id, correct_count, self.goal_for(course_id))
        self._notify()

        try:
            self._holding_resources = True
            self.camera.acquire()
            self.detector.initialize(self.handle_detection)
        except (CameraAccessDenied, DetectorInitFailure) as e:
            logger.error("Could not start detection: %s", e)
            return self._fail_start(str(e))
        except Exception as e:
            logger.exception("Unexpected error while starting detection")
            return self._fail_start(str(e) or type(e).__name__)

        self.session = with_state(self.session, SessionState.DETECTING)
        logger.info("Detecting hands for course %s", course_id)
        return self._notify()

    def _fail_start(self, message: str) -> SessionSnapshot:
        assert self.session is not None
        self._release_resources()
        self.session = with_state(self.session, SessionState.CAMERA_ERROR, error=message)
        return self._notify()

    def _finish(self, success: bool) -> None:
        assert self.session is not None
        self._cancel_timers()
        self._release_resources()
        session = self.session
        if success:
            self.session = with_state(session, SessionState.COMPLETED)
            if session.course_id is not None:
                self.progress.record_success(session.course_id, session.correct_count)
            logger.info(
                "Training completed: %d correct of %d gestures", session.correct_count, session.total_count
            )
        else:
            self.session = with_state(session, SessionState.FAILED)
            logger.info("Training failed at %d correct", session.correct_count)

    def _apply_events(self, events: List[SessionEvent]) -> None:
        """
        Fold events into the session, emitting each to event listeners.

        An accepted gesture that reaches the goal replaces the rest of the
        frame's events with GOAL_REACHED, which completes the session.
        NO_HAND_TIMEOUT fails it.
        """
        assert self.session is not None
        goal = self.goal_for(self.session.course_id)
        pending = list(events)
        while pending:
            event = pending.pop(0)
            self.session = apply_event(self.session, event, self.config, goal)
            for listener in list(self._event_listeners):
                listener(event)

            if event.kind is SessionEventKind.GESTURE_ACCEPTED:
                logger.info(
                    "Gesture accepted (%d/%d, %d total)",
                    self.session.correct_count,
                    goal,
                    self.session.total_count,
                )
                if self.session.correct_count >= goal:
                    pending = [SessionEvent(SessionEventKind.GOAL_REACHED, event.at)]
            elif event.kind is SessionEventKind.GOAL_REACHED:
                logger.info("Goal reached for course %s", self.session.course_id)
                self._finish(True)
            elif event.kind is SessionEventKind.NO_HAND_TIMEOUT:
                logger.info("No hand detected for %.1fs", self.config.no_hand_timeout_s)
                self._finish(False)

    def _on_no_hand_timeout(self, generation: int, event: SessionEvent) -> None:
        session = self.session
        if session is None or session.generation != generation or session.state is not SessionState.DETECTING:
            logger.debug("Ignoring stale no-hand timeout from session %d", generation)
            return
        self._apply_events([event])
        self._notify(event.at)

    def _cancel_timers(self) -> None:
        if self.session is not None and self.session.no_hand_timer is not None:
            self.session.no_hand_timer.cancel()
            self.session = dataclasses.replace(self.session, no_hand_timer=None)

    def _release_resources(self) -> None:
        if not self._holding_resources:
            return
        self._holding_resources = False
        try:
            self.detector.close()
        except Exception:
            logger.exception("Detector close failed")
        try:
            self.camera.release()
        except Exception:
            logger.exception("Camera release failed")

    def _discard_session(self) -> None:
        self._cancel_timers()
        self._release_resources()
        self.session = None

    def _notify(self, now: Optional[float] = None) -> SessionSnapshot:
        snap = self.snapshot(now)
        for listener in list(self._listeners):
            listener(snap)
        return snap
