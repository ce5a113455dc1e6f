"""
Server-attached webcam via OpenCV.

A daemon thread keeps grabbing frames and stores the newest JPEG, so
capture_bytes() hands back whatever is current without touching the device.
CAMERA_INDEX env var (default 0) selects the webcam device.
"""
import os
import threading

import cv2

from recallscan.adapters.camera.base import CameraAdapter


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None, jpeg_quality: int = 85,
                 interval_s: float = 0.1):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._quality = jpeg_quality
        self._interval = interval_s
        self._latest: bytes | None = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._grab_loop, name="cv2-camera", daemon=True)
        self._thread.start()

    def _grab_loop(self):
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            return
        self.status.log(f"cv2_camera: streaming from device {self._index}")
        try:
            while not self._stop.is_set():
                ret, frame = cap.read()
                if not ret or frame is None:
                    self.status.log("cv2_camera: frame grab failed")
                    self._stop.wait(1.0)
                    continue
                ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._quality])
                if ok:
                    with self._lock:
                        self._latest = buf.tobytes()
                self._stop.wait(self._interval)
        finally:
            cap.release()

    def capture_bytes(self) -> bytes | None:
        # first call starts the grabber; there is no frame until it delivers one
        self.start()
        with self._lock:
            return self._latest

    def release(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        with self._lock:
            self._latest = None
