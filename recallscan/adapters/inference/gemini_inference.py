"""
Gemini inference over the Generative Language REST API (v1beta).

Requires GEMINI_API_KEY. GEMINI_MODEL picks the model; the default is the
one the mobile app shipped with. Calls go through the shared retry helper,
so 429/503 are retried with backoff before an InferenceError is raised.
"""
import base64
import json

import httpx

from recallscan.adapters.http_retry import DEFAULT_MAX_RETRIES, redact_key, request_with_retry
from recallscan.adapters.inference.base import InferenceClient, InferenceError
from recallscan.orchestrator.contracts import Frame

API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-1.5-pro-latest"


def _model_path(name: str) -> str:
    return name if name.startswith("models/") else f"models/{name}"


class GeminiInference(InferenceClient):
    name = "gemini"

    def __init__(self, status_store, api_key: str, model: str = DEFAULT_GEMINI_MODEL,
                 timeout: float = 60.0, client: httpx.AsyncClient | None = None,
                 max_retries: int = DEFAULT_MAX_RETRIES):
        self.status = status_store
        self._api_key = api_key
        self.model = _model_path(model)
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.max_retries = max_retries
        self.status.log(f"gemini: ready (model={self.model})")

    def _payload(self, instruction: str, image: Frame | None) -> dict:
        parts = [{"text": instruction}]
        if image is not None:
            parts.append({
                "inline_data": {
                    "mime_type": image.media_type,
                    "data": base64.b64encode(image.data).decode("utf-8"),
                }
            })
        return {"contents": [{"role": "user", "parts": parts}]}

    async def generate(self, instruction: str, image: Frame | None = None) -> str:
        url = f"{API_BASE}/{self.model}:generateContent"
        try:
            r = await request_with_retry(
                self._client, "POST", url,
                params={"key": self._api_key},
                json_payload=self._payload(instruction, image),
                max_retries=self.max_retries,
            )
        except httpx.HTTPError as e:
            self.status.log(f"gemini: transport error: {redact_key(str(e))}")
            raise InferenceError(f"Gemini transport error: {redact_key(str(e))}") from e

        if r.status_code >= 400:
            body = redact_key(r.text)[:2000]
            self.status.log(f"gemini: HTTP {r.status_code}: {body[:300]}")
            raise InferenceError(f"Gemini request failed: {r.status_code}", status_code=r.status_code, body=body)

        try:
            data = r.json()
        except ValueError as e:
            body = redact_key(r.text)[:2000]
            self.status.log(f"gemini: non-JSON body: {body[:300]}")
            raise InferenceError("Unexpected Gemini response", status_code=r.status_code, body=body) from e
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            # blocked prompts come back with no candidates; treat as an empty reply
            self.status.log(f"gemini: no candidates; raw={json.dumps(data)[:300]}")
            return ""
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        self.status.log(f"gemini: raw='{text[:200]}'")
        return text

    async def aclose(self):
        await self._client.aclose()
