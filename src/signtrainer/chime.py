from __future__ import annotations

import threading
from typing import Optional

import numpy as np
import sounddevice as sd

from .types import SessionSnapshot, SessionState

SUCCESS_NOTE = 76  # E5
GESTURE_NOTE = 72  # C5
FAILURE_NOTE = 55  # G3


def midi_to_freq(midi_note: int) -> float:
    """Convert MIDI note number to frequency in Hz."""
    return 440.0 * (2.0 ** ((midi_note - 69) / 12.0))


class FeedbackChime:
    """
    Short sine tones for training feedback.

    Plays a note when a gesture is accepted, and a higher or lower one when
    the session completes or fails. Feed it every snapshot via `on_snapshot`.
    """

    def __init__(self, sample_rate: int = 44100, volume: float = 0.2, duration_s: float = 0.15) -> None:
        self.sample_rate = sample_rate
        self.volume = max(0.0, min(1.0, volume))
        self.duration_s = duration_s

        self._stream: Optional[sd.OutputStream] = None
        self._lock = threading.Lock()
        self._frequency = 0.0
        self._remaining = 0
        self._phase = 0.0
        self._last_total = 0
        self._last_state: Optional[SessionState] = None

    def start(self) -> None:
        if self._stream is not None:
            return
        self._stream = sd.OutputStream(
            samplerate=self.sample_rate,
            channels=1,
            callback=self._audio_callback,
            blocksize=1024,
        )
        self._stream.start()

    def stop(self) -> None:
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None

    def play(self, midi_note: int) -> None:
        with self._lock:
            self._frequency = midi_to_freq(midi_note)
            self._remaining = int(self.sample_rate * self.duration_s)
            self._phase = 0.0

    def on_snapshot(self, snap: SessionSnapshot) -> None:
        if snap.state is not self._last_state:
            if snap.state is SessionState.COMPLETED:
                self.play(SUCCESS_NOTE)
            elif snap.state is SessionState.FAILED:
                self.play(FAILURE_NOTE)
        elif snap.total_count > self._last_total:
            self.play(GESTURE_NOTE)
        self._last_state = snap.state
        self._last_total = snap.total_count

    def _audio_callback(self, outdata, frames, time_info, status) -> None:
        with self._lock:
            if self._remaining <= 0 or self._frequency <= 0:
                outdata[:] = 0
                return

            n = min(frames, self._remaining)
            t = (np.arange(n) + self._phase) / self.sample_rate
            wave = self.volume * np.sin(2 * np.pi * self._frequency * t)
            outdata[:] = 0
            outdata[:n, 0] = wave.astype(np.float32)

            self._phase += n
            self._remaining -= n

    def __enter__(self) -> "FeedbackChime":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
