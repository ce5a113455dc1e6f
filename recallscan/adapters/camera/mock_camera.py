"""Mock camera: serves JPEGs from a fixture directory, cycling through them in name order."""
from pathlib import Path

from recallscan.adapters.camera.base import CameraAdapter


class MockCamera(CameraAdapter):
    def __init__(self, status_store, frames_dir: str | Path):
        self.status = status_store
        self.frames_dir = Path(frames_dir)
        self._next = 0

    def capture_bytes(self) -> bytes | None:
        jpegs = sorted(self.frames_dir.glob("*.jpg"))
        if not jpegs:
            self.status.log(f"mock_camera: no frames in {self.frames_dir}")
            return None
        chosen = jpegs[self._next % len(jpegs)]
        self._next += 1
        self.status.log(f"mock_camera: serving {chosen.name}")
        return chosen.read_bytes()
