"""
Tests for recall registry adapters.
"""
import json

import httpx
import pytest

from recallscan.adapters import http_retry
from recallscan.adapters.registry.firebase_registry import FirebaseRegistry
from recallscan.adapters.registry.json_registry import JsonFileRegistry
from recallscan.adapters.registry.memory_registry import MemoryRegistry
from recallscan.orchestrator.contracts import ObjectIdentity
from recallscan.orchestrator.errors import RegistryUnavailable
from recallscan.orchestrator.identifier import parse_identity

RECALLS = {
    "-a": {"productName": "Acme Blender", "recallReason": "blade", "identificationInfo": "BL-19", "url": "https://r/1"},
    "-b": {"productName": "Acme Blender", "recallReason": "cord", "identificationInfo": "BL-20", "url": "https://r/2"},
    "-c": {"productName": "Globex Heater", "recallReason": "fire", "identificationInfo": "4xxx"},
}


@pytest.fixture
def no_sleep(monkeypatch):
    slept = []

    async def _sleep(seconds):
        slept.append(seconds)

    monkeypatch.setattr(http_retry.asyncio, "sleep", _sleep)
    return slept


def firebase(status, handler, **kw) -> FirebaseRegistry:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirebaseRegistry(status, "https://demo.firebaseio.com/", client=client, **kw)


class TestMatching:
    async def test_exact_match(self, status):
        registry = MemoryRegistry(status, list(RECALLS.values()))
        record = await registry.lookup(ObjectIdentity("Globex Heater"))

        assert record.product_name == "Globex Heater"
        assert record.reason == "fire"
        assert record.remediation_url is None

    @pytest.mark.parametrize("name", ["acme blender", "Acme Blender ", "Acme", "Globex Heater!"])
    async def test_no_fuzzy_match(self, status, name):
        registry = MemoryRegistry(status, list(RECALLS.values()))
        assert await registry.lookup(ObjectIdentity(name)) is None

    async def test_padded_identity_does_not_match(self, status):
        registry = MemoryRegistry(status, [{"productName": "Acme"}])
        identity = parse_identity('{"objectName": " Acme "}')
        assert await registry.lookup(identity) is None

    async def test_first_match_wins(self, status):
        registry = MemoryRegistry(status, list(RECALLS.values()))
        record = await registry.lookup(ObjectIdentity("Acme Blender"))
        assert record.identifying_info == "BL-19"

    async def test_non_object_children_skipped(self, status):
        registry = MemoryRegistry(status, [None, "junk", 3, RECALLS["-c"]])
        assert (await registry.lookup(ObjectIdentity("Globex Heater"))) is not None

    async def test_outage_raises(self, status):
        registry = MemoryRegistry(status, list(RECALLS.values()))
        registry.unavailable = True
        with pytest.raises(RegistryUnavailable):
            await registry.lookup(ObjectIdentity("Acme Blender"))


class TestFirebaseRegistry:
    async def test_reads_recalls_node(self, status):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json=RECALLS)

        registry = firebase(status, handler)
        record = await registry.lookup(ObjectIdentity("Acme Blender"))
        await registry.lookup(ObjectIdentity("Acme Blender"))

        assert seen == ["/2024/recalls.json", "/2024/recalls.json"]
        assert record.remediation_url == "https://r/1"

    async def test_array_node_with_holes(self, status):
        registry = firebase(status, lambda r: httpx.Response(200, json=[None, RECALLS["-c"]]))
        assert (await registry.lookup(ObjectIdentity("Globex Heater"))).reason == "fire"

    async def test_empty_node_is_no_recall(self, status):
        registry = firebase(status, lambda r: httpx.Response(200, content=b"null"))
        assert await registry.lookup(ObjectIdentity("Acme Blender")) is None

    async def test_custom_path(self, status):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json={})

        await firebase(status, handler, path="/2025/recalls/").lookup(ObjectIdentity("x"))
        assert seen == ["/2025/recalls.json"]

    async def test_http_error_is_unavailable(self, status, no_sleep):
        registry = firebase(status, lambda r: httpx.Response(401, json={"error": "Permission denied"}))
        with pytest.raises(RegistryUnavailable) as exc:
            await registry.lookup(ObjectIdentity("Acme Blender"))
        assert "401" in exc.value.message
        assert no_sleep == []

    async def test_transport_error_is_unavailable(self, status):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RegistryUnavailable):
            await firebase(status, handler).lookup(ObjectIdentity("Acme Blender"))

    async def test_non_json_is_unavailable(self, status):
        registry = firebase(status, lambda r: httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(RegistryUnavailable):
            await registry.lookup(ObjectIdentity("Acme Blender"))

    async def test_retries_503_then_succeeds(self, status, no_sleep):
        responses = [
            httpx.Response(503, headers={"Retry-After": "2"}),
            httpx.Response(200, json=RECALLS),
        ]
        registry = firebase(status, lambda r: responses.pop(0))

        record = await registry.lookup(ObjectIdentity("Globex Heater"))
        assert record is not None
        assert no_sleep == [2.0]

    async def test_gives_up_after_max_retries(self, status, no_sleep):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(RegistryUnavailable):
            await firebase(status, handler, max_retries=2).lookup(ObjectIdentity("x"))
        assert len(calls) == 3
        assert len(no_sleep) == 2


class TestJsonFileRegistry:
    async def test_reads_file_each_lookup(self, status, tmp_path):
        path = tmp_path / "recalls.json"
        path.write_text(json.dumps({}), encoding="utf-8")
        registry = JsonFileRegistry(status, path)
        assert await registry.lookup(ObjectIdentity("Globex Heater")) is None

        path.write_text(json.dumps(RECALLS), encoding="utf-8")
        assert await registry.lookup(ObjectIdentity("Globex Heater")) is not None

    async def test_missing_file_is_unavailable(self, status, tmp_path):
        with pytest.raises(RegistryUnavailable):
            await JsonFileRegistry(status, tmp_path / "nope.json").lookup(ObjectIdentity("x"))

    async def test_bad_json_is_unavailable(self, status, tmp_path):
        path = tmp_path / "recalls.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(RegistryUnavailable):
            await JsonFileRegistry(status, path).lookup(ObjectIdentity("x"))
