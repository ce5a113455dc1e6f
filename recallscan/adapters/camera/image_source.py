from recallscan.adapters.camera.base import CameraAdapter
from recallscan.adapters.camera.surface import SurfaceHitTest
from recallscan.orchestrator.contracts import Frame, SelectionPoint, WorldPosition
from recallscan.orchestrator.errors import NoActiveFrame, NoSurfaceHit


class ImageSource:
    """Pairs the current camera frame with the world point under the user's tap."""

    def __init__(self, camera: CameraAdapter, surface: SurfaceHitTest, status_store):
        self.camera = camera
        self.surface = surface
        self.status = status_store

    def capture(self, point: SelectionPoint) -> tuple[Frame, WorldPosition]:
        frame_bytes = self.camera.capture_bytes()
        if not frame_bytes:
            raise NoActiveFrame("no current camera frame")

        position = self.surface.hit_test(point)
        if position is None:
            raise NoSurfaceHit(f"tap ({point.x:.2f}, {point.y:.2f}) hit no surface")

        self.status.log(
            f"image_source: {len(frame_bytes)}B frame, anchor=({position.x:.2f}, {position.y:.2f}, {position.z:.2f})"
        )
        return Frame(data=frame_bytes, media_type=self.camera.media_type), position
