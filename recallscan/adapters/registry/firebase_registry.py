"""
Firebase Realtime Database registry (REST read).

Reads GET <FIREBASE_DATABASE_URL>/<RECALLS_PATH>.json, one request per
lookup. The node is either an object keyed by recall id or an array.
  Response: {"<id>": {"productName": "...", "recallReason": "...",
                      "identificationInfo": "...", "url": "..."}, ...}
"""
import httpx

from recallscan.adapters.http_retry import DEFAULT_MAX_RETRIES, redact_key, request_with_retry
from recallscan.adapters.registry.base import RecallRegistry
from recallscan.orchestrator.errors import RegistryUnavailable

DEFAULT_RECALLS_PATH = "2024/recalls"


class FirebaseRegistry(RecallRegistry):
    name = "firebase"

    def __init__(self, status_store, database_url: str, path: str = DEFAULT_RECALLS_PATH,
                 timeout: float = 15.0, client: httpx.AsyncClient | None = None,
                 max_retries: int = DEFAULT_MAX_RETRIES):
        super().__init__(status_store)
        self.base_url = database_url.rstrip("/")
        self.path = path.strip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.max_retries = max_retries

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.path}.json"

    async def fetch_snapshot(self):
        self.status.log(f"firebase_registry: GET /{self.path}.json")
        try:
            resp = await request_with_retry(self._client, "GET", self.url, max_retries=self.max_retries)
        except httpx.HTTPError as e:
            self.status.log(f"firebase_registry: transport error: {redact_key(str(e))}")
            raise RegistryUnavailable(f"registry unreachable: {redact_key(str(e))}") from e

        if resp.status_code >= 400:
            body = redact_key(resp.text)[:300]
            self.status.log(f"firebase_registry: HTTP {resp.status_code}: {body}")
            raise RegistryUnavailable(f"registry returned {resp.status_code}", detail=body)
        try:
            return resp.json()
        except ValueError as e:
            raise RegistryUnavailable("registry returned non-JSON body", detail=resp.text[:300]) from e

    async def aclose(self):
        await self._client.aclose()
