import json
import re

from recallscan.adapters.inference.base import InferenceClient, InferenceError
from recallscan.orchestrator.contracts import Frame, ObjectIdentity
from recallscan.orchestrator.errors import EmptyResponse, IdentifyBackendError, MalformedResponse
from recallscan.orchestrator.prompts import IDENTIFY_INSTRUCTION

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_json(text: str) -> dict:
    """
    Parse the first JSON object out of model output.
    Handles ```json fences, prose before/after and stray braces.
    """
    cleaned = _FENCE.sub("", text).strip()
    try:
        obj = json.loads(cleaned)
        if isinstance(obj, dict):
            return obj
    except ValueError:
        pass

    decoder = json.JSONDecoder()
    start = cleaned.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(cleaned, start)
        except ValueError:
            obj = None
        if isinstance(obj, dict):
            return obj
        start = cleaned.find("{", start + 1)

    raise ValueError("No JSON object found in model output")


def parse_identity(raw: str) -> ObjectIdentity:
    if raw is None or not raw.strip():
        raise EmptyResponse("model returned no text")
    try:
        obj = extract_json(raw)
    except ValueError as e:
        raise MalformedResponse(str(e), detail=raw[:500]) from e

    name = obj.get("objectName")
    if not isinstance(name, str) or not name.strip():
        raise MalformedResponse("missing or empty 'objectName'", detail=raw[:500])
    # kept verbatim: the registry match is exact
    return ObjectIdentity(name=name)


class ObjectIdentifier:
    def __init__(self, client: InferenceClient, status_store):
        self.client = client
        self.status = status_store

    async def identify(self, frame: Frame) -> ObjectIdentity:
        try:
            raw = await self.client.generate(IDENTIFY_INSTRUCTION, image=frame)
        except InferenceError as e:
            raise IdentifyBackendError(e.message, detail=e.body) from e

        try:
            identity = parse_identity(raw)
        except MalformedResponse as e:
            self.status.log(f"identifier: malformed response ({e.message}): {e.detail!r}")
            raise
        self.status.log(f"identifier: → {identity.name}")
        return identity
