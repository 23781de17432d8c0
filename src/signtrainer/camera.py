from __future__ import annotations

import platform
from typing import Optional

import cv2
import numpy as np

from .config import CAMERA_HEIGHT, CAMERA_WIDTH, DEFAULT_CAMERA_INDEX
from .errors import CameraAccessDenied
from .logger import get_logger

logger = get_logger("camera")


class OpenCVCamera:
    """
    Webcam capture through `cv2.VideoCapture`.

    Frames are mirrored (selfie mode) unless `mirror=False`.
    """

    def __init__(
        self,
        index: int = DEFAULT_CAMERA_INDEX,
        width: int = CAMERA_WIDTH,
        height: int = CAMERA_HEIGHT,
        mirror: bool = True,
    ) -> None:
        self.index = index
        self.width = width
        self.height = height
        self.mirror = mirror
        self._cap: Optional[cv2.VideoCapture] = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def acquire(self) -> cv2.VideoCapture:
        if self._cap is not None:
            return self._cap

        if platform.system() == "Darwin":
            cap = cv2.VideoCapture(self.index, cv2.CAP_AVFOUNDATION)
        else:
            cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CameraAccessDenied(
                f"Could not open camera index {self.index}. "
                "Make sure the camera is connected and this application has permission to use it."
            )

        # best effort
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._cap = cap
        logger.info("Camera %d opened", self.index)
        return cap

    def read(self) -> Optional[np.ndarray]:
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok:
            return None
        if self.mirror:
            frame = cv2.flip(frame, 1)
        return frame

    def release(self) -> None:
        if self._cap is None:
            return
        self._cap.release()
        self._cap = None
        logger.info("Camera %d released", self.index)

    def __enter__(self) -> "OpenCVCamera":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
