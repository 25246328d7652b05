# config.py - Service configuration
# This file contains configuration settings for the llm_service, including provider credentials.

from pydantic_settings import BaseSettings
from typing import Dict, Literal, Optional

class LLMSettings(BaseSettings):
    # Provider credentials, one variable per provider (e.g. OPENAI_API_KEY)
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    xai_api_key: Optional[str] = None

    # Override for OpenAI-compatible proxies
    openai_base_url: Optional[str] = None

    # Gateway Configuration
    llm_backend: Literal["http", "delegation"] = "http"
    llm_default_provider: Optional[str] = None
    llm_request_timeout: float = 120.0  # seconds

    # Service Configuration
    llm_service_name: str = "llm-service"
    llm_service_port: int = 8005
    llm_log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def api_keys(self) -> Dict[str, str]:
        """Credentials that are actually set, keyed by provider name."""
        keys = {
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "gemini": self.gemini_api_key,
            "mistral": self.mistral_api_key,
            "xai": self.xai_api_key,
        }
        return {name: key for name, key in keys.items() if key}
