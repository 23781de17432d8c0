"""
Turns per-frame hand presence into scored session events.

The processor holds no state of its own: the timestamps and the no-hand timer
it works with live on the `TrainingSession` passed in, and an updated copy is
returned together with the events raised by the frame.

Timing rules (see `TrainingConfig`):

- After a frame is scored, frames arriving within `suppression_window_s` are
  shown but never scored and never touch timers.
- A hand is accepted as a gesture at most once per `recognition_cooldown_s`,
  measured from the previous accepted gesture.
- A hand missing for `no_hand_timeout_s` delivers a `NO_HAND_TIMEOUT` event to
  the `on_timeout` callback when the scheduler fires, unless a later scored
  frame sees a hand first.
"""

from __future__ import annotations

import dataclasses
from functools import partial
from typing import Callable, List, Tuple

from .config import DEFAULT_TRAINING_CONFIG, TrainingConfig
from .logger import get_logger
from .timers import TimerScheduler
from .types import DetectionResult, SessionEvent, SessionEventKind, TrainingSession

logger = get_logger("processor")

STATUS_IN_PROGRESS = "Gesture in progress..."
STATUS_NO_HAND = "Hand not detected"


class DetectionEventProcessor:
    def __init__(self, scheduler: TimerScheduler, config: TrainingConfig = DEFAULT_TRAINING_CONFIG) -> None:
        self.scheduler = scheduler
        self.config = config

    def in_suppression_window(self, session: TrainingSession, now: float) -> bool:
        if session.last_event_at is None:
            return False
        return now - session.last_event_at < self.config.suppression_window_s

    def cooldown_elapsed(self, session: TrainingSession, now: float) -> bool:
        if session.last_accepted_at is None:
            return True
        return now - session.last_accepted_at >= self.config.recognition_cooldown_s

    def process(
        self,
        session: TrainingSession,
        result: DetectionResult,
        now: float,
        on_timeout: Callable[[SessionEvent], None],
    ) -> Tuple[TrainingSession, List[SessionEvent]]:
        """
        Apply one detection result to `session`.

        Args:
            session: Current session; must be in the detecting state.
            result: Hand presence for this frame.
            now: Frame time on the scheduler clock.
            on_timeout: Receives the `NO_HAND_TIMEOUT` event if the timer armed here fires.

        Returns:
            (updated session, events raised by this frame)
        """
        if self.in_suppression_window(session, now):
            return dataclasses.replace(session, hand_detected=result.hand_present), []

        session = dataclasses.replace(
            session,
            last_event_at=now,
            suppression_deadline=now + self.config.suppression_window_s,
            hand_detected=result.hand_present,
        )
        events: List[SessionEvent] = []

        if result.hand_present:
            if session.no_hand_timer is not None:
                session.no_hand_timer.cancel()
                logger.debug("Hand back; no-hand timer cancelled")
                session = dataclasses.replace(session, no_hand_timer=None)

            if self.cooldown_elapsed(session, now):
                session = dataclasses.replace(session, last_accepted_at=now)
                events.append(SessionEvent(SessionEventKind.GESTURE_ACCEPTED, now))
            else:
                logger.debug("Hand present but cooldown not elapsed")
            events.append(SessionEvent(SessionEventKind.GESTURE_IN_PROGRESS, now))
            return dataclasses.replace(session, status=STATUS_IN_PROGRESS), events

        events.append(SessionEvent(SessionEventKind.HAND_MISSING, now))
        if session.no_hand_timer is None or not session.no_hand_timer.pending:
            timer = self.scheduler.call_later(
                self.config.no_hand_timeout_s, partial(self._timed_out, on_timeout), label="no-hand timeout"
            )
            logger.debug("No hand; failing in %.1fs unless one appears", self.config.no_hand_timeout_s)
            session = dataclasses.replace(session, no_hand_timer=timer)
        return dataclasses.replace(session, status=STATUS_NO_HAND), events

    def _timed_out(self, on_timeout: Callable[[SessionEvent], None]) -> None:
        on_timeout(SessionEvent(SessionEventKind.NO_HAND_TIMEOUT, self.scheduler.now()))
