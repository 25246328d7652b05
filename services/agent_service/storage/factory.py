# factory.py - Store selection
# This file builds the configured agent store backend.

from ..config import Settings
from .base import AgentStore
from .file_store import FileAgentStore
from .memory_store import InMemoryAgentStore
from .redis_store import RedisAgentStore

def create_store(settings: Settings) -> AgentStore:
    if settings.storage_backend == "redis":
        return RedisAgentStore(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
        )
    if settings.storage_backend == "memory":
        return InMemoryAgentStore()
    return FileAgentStore(settings.storage_path)
