from __future__ import annotations

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from .types import Course, SessionSnapshot, SessionState

GREEN = (40, 200, 60)
RED = (60, 60, 230)
PURPLE = (200, 60, 140)
WHITE = (255, 255, 255)
GREY = (160, 160, 160)

STATE_TITLES = {
    SessionState.IDLE: "Learn sign language",
    SessionState.AWAITING_COURSE_SELECTION: "Choose a course",
    SessionState.INITIALIZING: "Starting camera...",
    SessionState.DETECTING: "Training",
    SessionState.PAUSED: "Paused",
    SessionState.COMPLETED: "Training complete!",
    SessionState.FAILED: "Training failed",
    SessionState.CAMERA_ERROR: "Camera error",
}


def draw_text(frame, text: str, org: Tuple[int, int], color=WHITE, scale=0.6, thickness=2):
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), thickness + 2, cv2.LINE_AA)
    cv2.putText(frame, text, org, cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)
    return frame


def draw_bar(frame, org: Tuple[int, int], size: Tuple[int, int], fraction: float, color=GREEN):
    x, y = org
    w, h = size
    fraction = max(0.0, min(1.0, fraction))
    cv2.rectangle(frame, (x, y), (x + w, y + h), GREY, 1)
    if fraction > 0:
        cv2.rectangle(frame, (x, y), (x + int(round(w * fraction)), y + h), color, -1)
    return frame


def blank_frame(width: int = 960, height: int = 540) -> np.ndarray:
    return np.zeros((height, width, 3), dtype=np.uint8)


def draw_snapshot(frame, snap: SessionSnapshot):
    """Overlay the session counters, status and feedback on a camera frame."""
    title = STATE_TITLES[snap.state]
    if snap.course_id is not None:
        title = f"{title} - Vowel {snap.course_id}"
    draw_text(frame, title, (12, 30), PURPLE, scale=0.8)

    y = 60
    if snap.instruction:
        draw_text(frame, f"Goal: {snap.instruction}", (12, y))
        y += 28

    if snap.error:
        draw_text(frame, snap.error, (12, y), RED)
        y += 28

    if snap.course_id is None:
        return frame

    draw_text(
        frame,
        f"Total {snap.total_count} | Correct {snap.correct_count}/{snap.goal} | "
        f"Missed {snap.missed_count} | Progress {snap.progress_percent}%",
        (12, y),
    )
    y += 18
    draw_bar(frame, (12, y), (300, 10), snap.progress_percent / 100.0, PURPLE)
    y += 36

    if snap.state is SessionState.DETECTING:
        status = snap.status if snap.hand_detected and snap.status else "Hand not detected"
        draw_text(frame, status, (12, y), GREEN if snap.hand_detected else RED)
        y += 18
        draw_bar(frame, (12, y), (120, 8), 1.0 if snap.hand_detected else 0.0, GREEN)
        y += 30

    if snap.feedback:
        draw_text(frame, snap.feedback, (12, y), GREEN, scale=1.0)
        y += 36

    if snap.state is SessionState.COMPLETED:
        draw_text(frame, f"{snap.correct_count} correct gestures, accuracy {snap.accuracy_percent}%", (12, y), GREEN)
    return frame


def draw_menu(frame, courses: Sequence[Course], progress: dict, selected: Optional[str] = None):
    """Course cards with per-course progress, one row each."""
    y = 100
    for n, course in enumerate(courses, start=1):
        done = progress.get(course.id, 0)
        color = PURPLE if course.id == selected else WHITE
        draw_text(frame, f"[{n}] {course.id}: {course.instruction}", (12, y), color)
        draw_bar(frame, (12, y + 8), (200, 6), done / course.goal if course.goal else 0.0, PURPLE)
        draw_text(frame, f"{done}/{course.goal}", (222, y + 16), GREY, scale=0.5, thickness=1)
        y += 48
    return frame
