# gateway.py - Provider-agnostic chat completion gateway
# This file resolves providers and turns one request into one normalized response.

import logging
from typing import Dict, List, Optional

from shared.errors import (
    LLMAuthenticationError, LLMConfigurationError, LLMRequestError
)
from .backends.base import CompletionBackend
from .backends.delegation_backend import DelegationCompletionBackend
from .backends.http_backend import HttpCompletionBackend
from .config import LLMSettings
from .models import ChatCompletionRequest, ChatCompletionResponse, ProviderDescriptor
from .normalization import build_payload, classify_error, parse_completion, resolve_model
from .providers import PROVIDER_CATALOG, ProviderConfig, load_provider_configs

logger = logging.getLogger(__name__)

def create_backend(settings: LLMSettings) -> CompletionBackend:
    if settings.llm_backend == "delegation":
        return DelegationCompletionBackend(timeout=settings.llm_request_timeout)
    return HttpCompletionBackend(timeout=settings.llm_request_timeout)

class LLMGateway:
    """Single entry point for chat completions across providers.

    Credentials are taken from the settings object once, at construction.
    Each completion issues exactly one backend call; nothing is retried.
    """

    def __init__(self, settings: LLMSettings, backend: Optional[CompletionBackend] = None):
        self._providers: Dict[str, ProviderConfig] = load_provider_configs(settings)

        configured = self.list_providers()
        if not configured:
            env_names = ", ".join(f"{name.upper()}_API_KEY" for name in PROVIDER_CATALOG)
            raise LLMConfigurationError(
                "unknown", f"No LLM providers configured. Please set one of: {env_names}"
            )

        default_provider = (settings.llm_default_provider or "").lower()
        self.default_provider = default_provider if default_provider in configured else configured[0]
        self.backend = backend or create_backend(settings)
        logger.info(
            f"LLM gateway ready: providers={configured}, default={self.default_provider}, "
            f"backend={self.backend.name}"
        )

    def _resolve(self, provider_name: str) -> ProviderConfig:
        provider = self._providers.get((provider_name or "").lower())
        if provider is None:
            raise LLMConfigurationError(provider_name, f"Provider not configured: {provider_name}")
        return provider

    def get_provider(self, provider_name: str) -> ProviderDescriptor:
        return self._resolve(provider_name).descriptor()

    def list_providers(self) -> List[str]:
        return [name for name, provider in self._providers.items() if provider.api_key]

    async def create_chat_completion(self, provider_name: str,
                                     request: ChatCompletionRequest) -> ChatCompletionResponse:
        provider = self._resolve(provider_name)
        if not provider.api_key:
            raise LLMAuthenticationError(
                provider.name, f"API key not configured for provider: {provider.name}"
            )

        if request.stream:
            raise LLMRequestError(provider.name, "Streaming responses are not supported")

        model = resolve_model(provider.name, request.model, provider.spec.default_model)
        payload = build_payload(request, model)
        logger.info(
            f"Chat completion via {self.backend.name} backend: provider={provider.name}, "
            f"model={model}, messages={len(request.messages)}"
        )

        try:
            raw = await self.backend.complete(provider, payload)
        except Exception as e:
            error = classify_error(provider.name, e)
            logger.error(f"Chat completion failed ({error.tag}) for {provider.name}: {error.message}")
            raise error

        return parse_completion(raw, model)

    async def aclose(self) -> None:
        await self.backend.aclose()
