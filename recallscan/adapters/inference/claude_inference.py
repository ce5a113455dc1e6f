"""
Claude inference via the Anthropic SDK (async client).

Requires ANTHROPIC_API_KEY in environment (.env or system env).
CLAUDE_MODEL overrides the default model.
"""
import base64

import anthropic

from recallscan.adapters.inference.base import InferenceClient, InferenceError
from recallscan.orchestrator.contracts import Frame

DEFAULT_CLAUDE_MODEL = "claude-haiku-4-5-20251001"


class ClaudeInference(InferenceClient):
    name = "claude"

    def __init__(self, status_store, api_key: str, model: str = DEFAULT_CLAUDE_MODEL,
                 max_tokens: int = 512, client: anthropic.AsyncAnthropic | None = None):
        self.status = status_store
        self.model = model
        self.max_tokens = max_tokens
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key)
        self.status.log(f"claude: ready ({model})")

    def _content(self, instruction: str, image: Frame | None) -> list:
        content = []
        if image is not None:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.media_type,
                    "data": base64.standard_b64encode(image.data).decode("utf-8"),
                },
            })
        content.append({"type": "text", "text": instruction})
        return content

    async def generate(self, instruction: str, image: Frame | None = None) -> str:
        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": self._content(instruction, image)}],
            )
        except anthropic.APIStatusError as e:
            self.status.log(f"claude: HTTP {e.status_code}: {e.message}")
            raise InferenceError(f"Claude request failed: {e.status_code}",
                                 status_code=e.status_code, body=str(e.body)[:2000]) from e
        except anthropic.APIError as e:
            self.status.log(f"claude: API error: {e}")
            raise InferenceError(f"Claude API error: {e}") from e

        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")
        self.status.log(f"claude: raw='{text[:200]}'")
        return text

    async def aclose(self):
        await self._client.close()
