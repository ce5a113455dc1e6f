from abc import ABC, abstractmethod


class CameraAdapter(ABC):
    media_type = "image/jpeg"

    @abstractmethod
    def capture_bytes(self) -> bytes | None:
        """Return the current frame as JPEG bytes, or None when there is none. Must not wait on hardware."""
        ...
