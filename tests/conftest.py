"""
Pytest fixtures: a fully wired VerificationFlow on mock adapters.
"""
import asyncio
from dataclasses import dataclass, field

import pytest

from recallscan.adapters.camera.frame_buffer import FrameBufferCamera
from recallscan.adapters.camera.image_source import ImageSource
from recallscan.adapters.camera.surface import SurfaceHitTest
from recallscan.adapters.inference.mock_inference import MockInference
from recallscan.adapters.registry.memory_registry import MemoryRegistry
from recallscan.orchestrator.advisor import DisambiguationAdvisor
from recallscan.orchestrator.contracts import SelectionPoint, WorldPosition
from recallscan.orchestrator.identifier import ObjectIdentifier
from recallscan.orchestrator.presenter import Presenter
from recallscan.orchestrator.state_machine import VerificationFlow
from recallscan.services.status_store import StatusStore

ACME_REPLY = '```json\n{"objectName": "Acme Blender"}\n```'
ANCHOR = WorldPosition(x=0.1, y=0.0, z=-1.2)
TAP = SelectionPoint(x=0.5, y=0.7)

ACME_RECALL = {
    "productName": "Acme Blender",
    "recallReason": "blade can detach",
    "identificationInfo": "model X made in 2019",
    "url": "https://recall.example/acme",
}


class FixedHitTest(SurfaceHitTest):
    def __init__(self, position):
        self.position = position

    def hit_test(self, point):
        return self.position


class RecordingPresenter(Presenter):
    def __init__(self):
        self.events = []

    def on_busy_spinner(self, busy):
        self.events.append(("busy_spinner", busy))

    def on_label_ready(self, title, status, position):
        self.events.append(("label_ready", title, status, position))

    def on_prompt_ready(self, text):
        self.events.append(("prompt_ready", text))

    def on_remediation_link(self, url):
        self.events.append(("remediation_link", url))

    def on_notice(self, text):
        self.events.append(("notice", text))

    def of_kind(self, kind):
        return [e for e in self.events if e[0] == kind]


@dataclass
class Rig:
    status: StatusStore
    camera: FrameBufferCamera
    inference: MockInference
    registry: MemoryRegistry
    presenter: RecordingPresenter
    flow: VerificationFlow
    gate: asyncio.Event | None = None
    extras: dict = field(default_factory=dict)


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def make_rig(status):
    """Build a flow; `replies` feed the shared mock backend in call order."""

    def _make(replies=(), entries=(), gated=False, hit=ANCHOR, frame=b"\xff\xd8jpeg",
              answer_timeout=None) -> Rig:
        camera = FrameBufferCamera(status)
        if frame is not None:
            camera.push(frame)
        gate = asyncio.Event() if gated else None
        inference = MockInference(status, replies=replies, gate=gate)
        registry = MemoryRegistry(status, entries=list(entries))
        presenter = RecordingPresenter()
        flow = VerificationFlow(
            image_source=ImageSource(camera, FixedHitTest(hit), status),
            identifier=ObjectIdentifier(inference, status),
            registry=registry,
            advisor=DisambiguationAdvisor(inference, status),
            status_store=status,
            presenter=presenter,
            answer_timeout=answer_timeout,
        )
        return Rig(status, camera, inference, registry, presenter, flow, gate)

    return _make
