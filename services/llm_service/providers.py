# providers.py - Provider catalog
# This file lists the LLM providers the gateway knows and resolves their runtime configuration.

from typing import Dict, List, NamedTuple, Optional

from .config import LLMSettings
from .models import ProviderDescriptor

class ProviderSpec(NamedTuple):
    base_url: str
    default_model: str
    supported_models: List[str]
    supports_vision: bool

# Every provider is reached through an OpenAI-compatible chat completions endpoint
PROVIDER_CATALOG: Dict[str, ProviderSpec] = {
    "openai": ProviderSpec(
        base_url="https://api.openai.com/v1",
        default_model="gpt-4o-mini",
        supported_models=["gpt-4o", "gpt-4o-mini", "gpt-4.1", "gpt-4.1-mini", "o4-mini"],
        supports_vision=True,
    ),
    "anthropic": ProviderSpec(
        base_url="https://api.anthropic.com/v1",
        default_model="claude-sonnet-4-0",
        supported_models=["claude-opus-4-0", "claude-sonnet-4-0", "claude-3-7-sonnet-latest",
                          "claude-3-5-haiku-latest"],
        supports_vision=True,
    ),
    "gemini": ProviderSpec(
        base_url="https://generativelanguage.googleapis.com/v1beta/openai",
        default_model="gemini-2.5-flash",
        supported_models=["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash"],
        supports_vision=True,
    ),
    "mistral": ProviderSpec(
        base_url="https://api.mistral.ai/v1",
        default_model="mistral-small-latest",
        supported_models=["mistral-small-latest", "mistral-medium-latest", "mistral-large-latest"],
        supports_vision=False,
    ),
    "xai": ProviderSpec(
        base_url="https://api.x.ai/v1",
        default_model="grok-3-mini",
        supported_models=["grok-4-0709", "grok-3", "grok-3-mini"],
        supports_vision=False,
    ),
}

class ProviderConfig(NamedTuple):
    name: str
    base_url: str
    api_key: Optional[str]
    spec: ProviderSpec

    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.name,
            default_model=self.spec.default_model,
            supported_models=list(self.spec.supported_models),
            supports_tool_calling=True,
            supports_streaming=False,
            supports_vision=self.spec.supports_vision,
            configured=bool(self.api_key),
        )

def load_provider_configs(settings: LLMSettings) -> Dict[str, ProviderConfig]:
    api_keys = settings.api_keys()
    configs = {}
    for name, spec in PROVIDER_CATALOG.items():
        base_url = spec.base_url
        if name == "openai" and settings.openai_base_url:
            base_url = settings.openai_base_url
        configs[name] = ProviderConfig(
            name=name,
            base_url=base_url.rstrip("/"),
            api_key=api_keys.get(name),
            spec=spec,
        )
    return configs
