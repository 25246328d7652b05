# config.py - Service configuration
# This file contains configuration settings for the agent_service.

from pydantic_settings import BaseSettings
from typing import Literal, Optional

class Settings(BaseSettings):
    # Service Configuration
    service_name: str = "agent-service"
    service_port: int = 8001
    log_level: str = "INFO"

    # Storage Configuration
    storage_backend: Literal["file", "redis", "memory"] = "file"
    storage_path: str = "./data"

    # Redis Configuration (storage_backend == "redis")
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    # Agent Configuration
    default_agent_timeout: int = 30000  # milliseconds

    class Config:
        env_prefix = "AGENT_SERVICE_"
        env_file = ".env"
        extra = "ignore"

settings = Settings()
