"""
Tests for ObjectIdentifier and model-output parsing.
"""
import httpx
import pytest

from recallscan.adapters.inference.base import InferenceError
from recallscan.adapters.inference.gemini_inference import GeminiInference
from recallscan.adapters.inference.mock_inference import MockInference
from recallscan.orchestrator import errors
from recallscan.orchestrator.contracts import Frame, ObjectIdentity
from recallscan.orchestrator.errors import EmptyResponse, IdentifyBackendError, MalformedResponse
from recallscan.orchestrator.identifier import ObjectIdentifier, extract_json, parse_identity
from recallscan.orchestrator.prompts import IDENTIFY_INSTRUCTION

FRAME = Frame(data=b"\xff\xd8jpeg")


class TestParseIdentity:
    def test_plain_json(self):
        assert parse_identity('{"objectName": "Acme - Blender"}') == ObjectIdentity("Acme - Blender")

    def test_fenced_json(self):
        raw = '```json\n{"objectName": "Acme - Blender"}\n```'
        assert parse_identity(raw).name == "Acme - Blender"

    def test_bare_fence_and_prose(self):
        raw = 'Sure! Here you go:\n```\n{"objectName": "Globex - Kettle"}\n```\nAnything else?'
        assert parse_identity(raw).name == "Globex - Kettle"

    def test_name_kept_verbatim(self):
        assert parse_identity('{"objectName": " Acme "}').name == " Acme "

    def test_nested_object_inside_prose(self):
        raw = 'Here you go: {"objectName": "Acme - Blender", "details": {"color": "red"}} hope it helps'
        assert parse_identity(raw).name == "Acme - Blender"

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty(self, raw):
        with pytest.raises(EmptyResponse):
            parse_identity(raw)

    @pytest.mark.parametrize("raw", [
        "a blender",
        '{"name": "Acme - Blender"}',
        '{"objectName": ""}',
        '{"objectName": 42}',
        '["Acme - Blender"]',
    ])
    def test_malformed(self, raw):
        with pytest.raises(MalformedResponse):
            parse_identity(raw)

    def test_extract_json_skips_invalid_blocks(self):
        assert extract_json('{not json} then {"objectName": "X"}') == {"objectName": "X"}


class TestObjectIdentifier:
    async def test_sends_instruction_with_frame(self, status):
        client = MockInference(status, replies=['{"objectName": "Acme - Blender"}'])
        identity = await ObjectIdentifier(client, status).identify(FRAME)

        assert identity.name == "Acme - Blender"
        instruction, image = client.calls[0]
        assert instruction == IDENTIFY_INSTRUCTION
        assert image is FRAME

    async def test_backend_error_keeps_detail(self, status):
        client = MockInference(status, replies=[InferenceError("HTTP 500", status_code=500, body="upstream down")])

        with pytest.raises(IdentifyBackendError) as exc:
            await ObjectIdentifier(client, status).identify(FRAME)
        assert exc.value.message == "HTTP 500"
        assert exc.value.detail == "upstream down"

    async def test_malformed_is_logged(self, status):
        client = MockInference(status, replies=["no idea"])

        with pytest.raises(MalformedResponse):
            await ObjectIdentifier(client, status).identify(FRAME)
        assert any("malformed" in line for line in status.logs)

    async def test_unreadable_backend_body_is_backend_error(self, status):
        client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda r: httpx.Response(200, text="<html>proxy error</html>")))
        gemini = GeminiInference(status, "k", client=client)

        with pytest.raises(IdentifyBackendError) as exc:
            await ObjectIdentifier(gemini, status).identify(FRAME)
        assert exc.value.code == errors.ERR_IDENTIFY_BACKEND
        assert "proxy error" in exc.value.detail
