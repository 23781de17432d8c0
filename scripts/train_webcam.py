from __future__ import annotations

import argparse
import os
import sys

import cv2

# Allow running without installing the package (repo-local usage).
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(REPO_ROOT, "src")
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from signtrainer.camera import OpenCVCamera  # noqa: E402
from signtrainer.config import DetectorOptions  # noqa: E402
from signtrainer.courses import CourseCatalog  # noqa: E402
from signtrainer.detector import HandPresenceDetector  # noqa: E402
from signtrainer.hud import blank_frame, draw_menu, draw_snapshot, draw_text  # noqa: E402
from signtrainer.logger import setup_logging  # noqa: E402
from signtrainer.progress import ProgressTracker  # noqa: E402
from signtrainer.session import SessionController  # noqa: E402
from signtrainer.types import ACTIVE_STATES, SessionState  # noqa: E402

WINDOW = "signtrainer"

HELP = {
    SessionState.IDLE: "[enter] start training  [q] quit",
    SessionState.AWAITING_COURSE_SELECTION: "[1-5] pick a course  [b] back  [q] quit",
    SessionState.DETECTING: "[space] pause  [s] stop  [b] back  [q] quit",
    SessionState.PAUSED: "[space] resume  [s] stop  [b] back  [q] quit",
    SessionState.COMPLETED: "[r] retry  [b] back  [q] quit",
    SessionState.FAILED: "[r] retry  [b] back  [q] quit",
    SessionState.CAMERA_ERROR: "[r] retry  [b] back  [q] quit",
}


def main() -> int:
    ap = argparse.ArgumentParser(description="Practice vowel hand signs with your webcam.")
    ap.add_argument("--camera", type=int, default=0, help="Camera index (default: 0)")
    ap.add_argument("--width", type=int, default=1280, help="Capture width (best effort)")
    ap.add_argument("--height", type=int, default=720, help="Capture height (best effort)")
    ap.add_argument(
        "--no-mirror",
        action="store_true",
        help="Disable horizontal mirroring (default is mirrored/selfie mode)",
    )
    ap.add_argument("--model", default=DetectorOptions().tasks_model_path, help="HandLandmarker .task file (Tasks fallback)")
    ap.add_argument("--sound", action="store_true", help="Play a chime on accepted gestures")
    ap.add_argument("--debug", action="store_true", help="Log per-frame decisions")
    args = ap.parse_args()

    logger = setup_logging(debug=args.debug)

    catalog = CourseCatalog.default()
    progress = ProgressTracker(catalog)
    camera = OpenCVCamera(args.camera, args.width, args.height, mirror=not args.no_mirror)
    detector = HandPresenceDetector(DetectorOptions(tasks_model_path=args.model))
    controller = SessionController(catalog, progress, camera, detector)

    chime = None
    if args.sound:
        from signtrainer.chime import FeedbackChime

        chime = FeedbackChime()
        chime.start()
        controller.subscribe(chime.on_snapshot)

    course_keys = {ord(str(n)): course.id for n, course in enumerate(catalog.list(), start=1)}

    try:
        with controller:
            while True:
                frame = camera.read() if controller.state in ACTIVE_STATES else None
                if frame is not None and controller.state is SessionState.DETECTING:
                    detector.send(frame)
                controller.poll()

                snap = controller.snapshot()
                canvas = frame if frame is not None else blank_frame()
                draw_snapshot(canvas, snap)
                if snap.state in (SessionState.IDLE, SessionState.AWAITING_COURSE_SELECTION):
                    draw_menu(canvas, catalog.list(), progress.as_dict())
                    summary = progress.summary()
                    draw_text(
                        canvas,
                        f"Completed {summary.completed} | In progress {summary.in_progress} | "
                        f"Total {summary.overall_percent}%",
                        (12, canvas.shape[0] - 40),
                    )
                draw_text(canvas, HELP.get(snap.state, "[q] quit"), (12, canvas.shape[0] - 12), scale=0.5, thickness=1)
                cv2.imshow(WINDOW, canvas)

                key = cv2.waitKey(1) & 0xFF
                if key in (ord("q"), 27):
                    break
                if key == 13 and snap.state is SessionState.IDLE:
                    controller.start()
                elif key in course_keys and snap.state in (SessionState.IDLE, SessionState.AWAITING_COURSE_SELECTION):
                    controller.start(course_keys[key])
                elif key == ord(" "):
                    controller.toggle_pause()
                elif key == ord("s"):
                    controller.stop(False)
                elif key == ord("r"):
                    controller.retry()
                elif key == ord("b"):
                    controller.go_back()
    finally:
        if chime is not None:
            chime.stop()
        cv2.destroyAllWindows()
        logger.info("Final progress: %s", progress.as_dict())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
