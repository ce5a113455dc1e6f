"""
Latest-frame buffer fed by the client (POST /frame).
capture_bytes() only reads what is already there, so it never blocks.
"""
import time

from recallscan.adapters.camera.base import CameraAdapter


class FrameBufferCamera(CameraAdapter):
    def __init__(self, status_store, max_age_s: float | None = None):
        self.status = status_store
        self.max_age_s = max_age_s
        self._frame: bytes | None = None
        self._at = 0.0

    def push(self, frame_bytes: bytes):
        self._frame = frame_bytes
        self._at = time.monotonic()

    def clear(self):
        self._frame = None

    def capture_bytes(self) -> bytes | None:
        if self._frame is None:
            return None
        if self.max_age_s is not None and time.monotonic() - self._at > self.max_age_s:
            self.status.log(f"frame_buffer: latest frame older than {self.max_age_s}s, ignoring")
            return None
        return self._frame
