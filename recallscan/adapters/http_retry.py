"""
Shared httpx request helper with bounded retry on 429/503.

Used by the Gemini / Kimi inference adapters and the Firebase registry.
Only those two status codes are retried; every other response is handed
back to the caller untouched so it can decide how to surface the error.
"""
import asyncio
import random
import re
from typing import Any, Dict, Optional

import httpx

DEFAULT_MAX_RETRIES = 3
MAX_BACKOFF_SECONDS = 20.0

RETRY_STATUS = (429, 503)


def redact_key(s: str) -> str:
    """Redact 'key=...' / 'auth=...' query values so secrets never reach the logs."""
    if not s:
        return s
    return re.sub(r"((?:key|auth)=)([^&\s]+)", r"\1REDACTED", s)


def backoff_seconds(resp: httpx.Response, attempt: int, max_backoff: float = MAX_BACKOFF_SECONDS) -> float:
    retry_after = resp.headers.get("retry-after")
    if retry_after:
        try:
            return max(0.5, min(float(retry_after), max_backoff))
        except ValueError:
            pass
    # exponential backoff with jitter
    return min(max_backoff, 2 ** attempt) + random.uniform(0.0, 0.5)


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json_payload: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    max_backoff: float = MAX_BACKOFF_SECONDS,
) -> httpx.Response:
    resp: Optional[httpx.Response] = None
    for attempt in range(max_retries + 1):
        resp = await client.request(method, url, params=params, json=json_payload, headers=headers)
        if resp.status_code in RETRY_STATUS and attempt < max_retries:
            await asyncio.sleep(backoff_seconds(resp, attempt, max_backoff))
            continue
        return resp
    return resp  # type: ignore[return-value]
