# http_backend.py - Direct HTTP completion backend
# This file calls a provider's chat completions endpoint directly with httpx.

import logging
from typing import Any, Dict, Optional

import httpx

from ..providers import ProviderConfig
from .base import CompletionBackend

logger = logging.getLogger(__name__)

class HttpStatusFailure(Exception):
    """Non-2xx reply. The message carries wording the gateway's classifier recognizes."""

    def __init__(self, status_code: int, body: str):
        if status_code in (401, 403):
            message = f"authentication failed (HTTP {status_code}): {body}"
        elif status_code == 429:
            message = f"rate limit exceeded (HTTP {status_code}): {body}"
        else:
            message = f"HTTP {status_code}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class HttpCompletionBackend(CompletionBackend):
    name = "http"

    def __init__(self, timeout: float = 120.0, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def complete(self, provider: ProviderConfig, payload: Dict[str, Any]) -> Any:
        url = f"{provider.base_url}/chat/completions"
        logger.debug(f"POST {url} (model={payload.get('model')})")

        response = await self.client.post(
            url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {provider.api_key}",
            },
        )

        if response.status_code >= 400:
            raise HttpStatusFailure(response.status_code, response.text)

        return response.json()

    async def aclose(self) -> None:
        await self.client.aclose()
