# delegation_backend.py - Multi-provider delegation backend
# This file delegates completion calls to the OpenAI SDK, one client per provider endpoint.

import logging
from typing import Any, Callable, Dict, Optional

from openai import AsyncOpenAI

from ..providers import ProviderConfig
from .base import CompletionBackend

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ProviderConfig], Any]

class DelegationCompletionBackend(CompletionBackend):
    name = "delegation"

    def __init__(self, timeout: float = 120.0, client_factory: Optional[ClientFactory] = None):
        self.timeout = timeout
        self.client_factory = client_factory or self._default_client
        self._clients: Dict[str, Any] = {}

    def _default_client(self, provider: ProviderConfig) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=provider.api_key,
            base_url=provider.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    def _client_for(self, provider: ProviderConfig) -> Any:
        if provider.name not in self._clients:
            self._clients[provider.name] = self.client_factory(provider)
            logger.info(f"Initialized delegation client for provider: {provider.name}")
        return self._clients[provider.name]

    async def complete(self, provider: ProviderConfig, payload: Dict[str, Any]) -> Any:
        client = self._client_for(provider)
        completion = await client.chat.completions.create(**payload)

        # SDK objects are flattened so the gateway parses the same plain data
        # the direct HTTP backend returns
        if hasattr(completion, "model_dump"):
            return completion.model_dump()
        return completion

    async def aclose(self) -> None:
        for client in self._clients.values():
            close = getattr(client, "close", None)
            if close is not None:
                await close()
        self._clients.clear()
