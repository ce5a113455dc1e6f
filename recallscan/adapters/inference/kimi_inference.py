"""
KIMI (Moonshot AI) inference over its OpenAI-compatible chat API.
Requires KIMI_API_KEY. No extra SDK, plain httpx.
"""
import base64

import httpx

from recallscan.adapters.http_retry import DEFAULT_MAX_RETRIES, request_with_retry
from recallscan.adapters.inference.base import InferenceClient, InferenceError
from recallscan.orchestrator.contracts import Frame

KIMI_API_URL = "https://api.moonshot.cn/v1/chat/completions"
DEFAULT_KIMI_MODEL = "moonshot-v1-8k-vision-preview"


class KimiInference(InferenceClient):
    name = "kimi"

    def __init__(self, status_store, api_key: str, model: str = DEFAULT_KIMI_MODEL,
                 timeout: float = 30.0, client: httpx.AsyncClient | None = None,
                 max_retries: int = DEFAULT_MAX_RETRIES):
        self.status = status_store
        self._api_key = api_key
        self.model = model
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.max_retries = max_retries
        self.status.log(f"kimi: ready (model={model})")

    async def generate(self, instruction: str, image: Frame | None = None) -> str:
        content = []
        if image is not None:
            b64 = base64.standard_b64encode(image.data).decode("utf-8")
            content.append({
                "type": "image_url",
                "image_url": {"url": f"data:{image.media_type};base64,{b64}", "detail": "auto"},
            })
        content.append({"type": "text", "text": instruction})
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
            "max_tokens": 512,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            resp = await request_with_retry(self._client, "POST", KIMI_API_URL,
                                            json_payload=payload, headers=headers,
                                            max_retries=self.max_retries)
        except httpx.HTTPError as e:
            self.status.log(f"kimi: transport error: {e}")
            raise InferenceError(f"KIMI transport error: {e}") from e

        if not resp.is_success:
            self.status.log(f"kimi: HTTP {resp.status_code}: {resp.text[:300]}")
            raise InferenceError(f"KIMI request failed: {resp.status_code}",
                                 status_code=resp.status_code, body=resp.text[:2000])
        try:
            text = resp.json()["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise InferenceError(f"Unexpected KIMI response shape: {resp.text[:300]}") from e
        self.status.log(f"kimi: raw='{text[:200]}'")
        return text

    async def aclose(self):
        await self._client.aclose()
