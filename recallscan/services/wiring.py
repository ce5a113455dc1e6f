"""
Composition root: builds every adapter once from the environment and hands
the shared inference client to both the identifier and the advisor.

Env vars are read here (after load_dotenv), never in the flow.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from recallscan.adapters.camera.base import CameraAdapter
from recallscan.adapters.camera.image_source import ImageSource
from recallscan.adapters.camera.surface import PlaneHitTest
from recallscan.adapters.http_retry import DEFAULT_MAX_RETRIES
from recallscan.adapters.inference.base import InferenceClient
from recallscan.adapters.inference.mock_inference import MockInference
from recallscan.adapters.registry.base import RecallRegistry
from recallscan.adapters.registry.firebase_registry import DEFAULT_RECALLS_PATH
from recallscan.adapters.registry.memory_registry import MemoryRegistry
from recallscan.orchestrator.advisor import DisambiguationAdvisor
from recallscan.orchestrator.identifier import ObjectIdentifier
from recallscan.orchestrator.state_machine import VerificationFlow
from recallscan.services.presenter import QueuePresenter
from recallscan.services.status_store import StatusStore


@dataclass
class Components:
    status: StatusStore
    camera: CameraAdapter
    inference: InferenceClient
    registry: RecallRegistry
    flow: VerificationFlow

    async def aclose(self):
        await self.inference.aclose()
        await self.registry.aclose()
        if hasattr(self.camera, "release"):
            self.camera.release()


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def _max_retries() -> int:
    return int(os.getenv("HTTP_MAX_RETRIES", str(DEFAULT_MAX_RETRIES)))


def build_inference(status: StatusStore) -> InferenceClient:
    # Values: gemini | claude | kimi | mock  (default: gemini)
    adapter = os.getenv("INFERENCE_ADAPTER", "gemini").lower()

    if adapter == "gemini":
        key = os.getenv("GEMINI_API_KEY", "").strip()
        if key:
            from recallscan.adapters.inference.gemini_inference import DEFAULT_GEMINI_MODEL, GeminiInference
            return GeminiInference(status, api_key=key,
                                   model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
                                   max_retries=_max_retries())
        status.log("inference: GEMINI_API_KEY not set, falling back to mock")

    elif adapter == "claude":
        key = os.getenv("ANTHROPIC_API_KEY", "").strip()
        if key:
            from recallscan.adapters.inference.claude_inference import DEFAULT_CLAUDE_MODEL, ClaudeInference
            return ClaudeInference(status, api_key=key,
                                   model=os.getenv("CLAUDE_MODEL", DEFAULT_CLAUDE_MODEL))
        status.log("inference: ANTHROPIC_API_KEY not set, falling back to mock")

    elif adapter == "kimi":
        key = os.getenv("KIMI_API_KEY", "").strip()
        if key:
            from recallscan.adapters.inference.kimi_inference import DEFAULT_KIMI_MODEL, KimiInference
            return KimiInference(status, api_key=key,
                                 model=os.getenv("KIMI_MODEL", DEFAULT_KIMI_MODEL),
                                 max_retries=_max_retries())
        status.log("inference: KIMI_API_KEY not set, falling back to mock")

    return MockInference(status)


def build_registry(status: StatusStore) -> RecallRegistry:
    # Values: firebase | json | memory  (default: firebase)
    adapter = os.getenv("REGISTRY_ADAPTER", "firebase").lower()

    if adapter == "firebase":
        url = os.getenv("FIREBASE_DATABASE_URL", "").strip()
        if url:
            from recallscan.adapters.registry.firebase_registry import FirebaseRegistry
            return FirebaseRegistry(status, database_url=url,
                                    path=os.getenv("RECALLS_PATH", DEFAULT_RECALLS_PATH),
                                    max_retries=_max_retries())
        status.log("registry: FIREBASE_DATABASE_URL not set, falling back to empty memory registry")

    elif adapter == "json":
        from recallscan.adapters.registry.json_registry import JsonFileRegistry
        return JsonFileRegistry(status, os.getenv("RECALLS_JSON", "recalls.json"))

    return MemoryRegistry(status)


def build_camera(status: StatusStore) -> CameraAdapter:
    # Values: buffer | cv2 | mock  (default: buffer)
    adapter = os.getenv("CAMERA_ADAPTER", "buffer").lower()
    if adapter == "cv2":
        from recallscan.adapters.camera.cv2_camera import CV2Camera
        camera = CV2Camera(status)
        camera.start()
        return camera
    if adapter == "mock":
        from recallscan.adapters.camera.mock_camera import MockCamera
        return MockCamera(status, os.getenv("MOCK_FRAMES_DIR", "frames"))

    from recallscan.adapters.camera.frame_buffer import FrameBufferCamera
    return FrameBufferCamera(status, max_age_s=_env_float("FRAME_MAX_AGE_SECONDS", None))


def build_components(env_file: str | None = ".env") -> Components:
    if env_file:
        load_dotenv(dotenv_path=env_file, override=False)

    status = StatusStore()
    inference = build_inference(status)
    registry = build_registry(status)
    camera = build_camera(status)
    surface = PlaneHitTest(
        height_m=_env_float("CAMERA_HEIGHT_M", 1.4),
        pitch_deg=_env_float("CAMERA_PITCH_DEG", -35.0),
        hfov_deg=_env_float("CAMERA_HFOV_DEG", 60.0),
        aspect=_env_float("CAMERA_ASPECT", 0.75),
    )
    status.log(f"adapters: inference={inference.name} registry={registry.name} camera={type(camera).__name__}")

    flow = VerificationFlow(
        image_source=ImageSource(camera, surface, status),
        identifier=ObjectIdentifier(inference, status),
        registry=registry,
        advisor=DisambiguationAdvisor(inference, status),
        status_store=status,
        presenter=QueuePresenter(status),
        answer_timeout=_env_float("ANSWER_TIMEOUT_SECONDS", None),
    )
    return Components(status=status, camera=camera, inference=inference, registry=registry, flow=flow)
