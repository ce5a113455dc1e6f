import asyncio
from typing import Callable, Iterable, Union

from recallscan.adapters.inference.base import InferenceClient
from recallscan.orchestrator.contracts import Frame

Reply = Union[str, Exception]


def canned_reply(instruction: str, image: Frame | None) -> str:
    """Offline demo replies, one per instruction kind."""
    if image is not None:
        return '```json\n{"objectName": "Acme - Blender"}\n```'
    if "(yes or no)" in instruction:
        return "No."
    return "Please enter the model number printed on the base of your product."


class MockInference(InferenceClient):
    """
    Scripted backend. `replies` is consumed in order (an Exception entry is
    raised instead of returned); when it runs out, `fallback` answers.
    Set `gate` to hold every call until the event is set.
    """
    name = "mock"

    def __init__(self, status_store, replies: Iterable[Reply] = (),
                 fallback: Callable[[str, Frame | None], str] = canned_reply,
                 gate: asyncio.Event | None = None):
        self.status = status_store
        self._replies = list(replies)
        self._fallback = fallback
        self.gate = gate
        self.calls: list[tuple[str, Frame | None]] = []

    async def generate(self, instruction: str, image: Frame | None = None) -> str:
        self.calls.append((instruction, image))
        if self.gate is not None:
            await self.gate.wait()
        reply = self._replies.pop(0) if self._replies else self._fallback(instruction, image)
        if isinstance(reply, Exception):
            self.status.log(f"mock_inference: raising {type(reply).__name__}")
            raise reply
        self.status.log(f"mock_inference: {reply[:80]!r}")
        return reply
