# redis_store.py - Redis agent store
# This file persists agents as JSON strings in Redis, with a set indexing every agent id.

import json
import logging
from typing import List, Optional

import redis
from pydantic import ValidationError as ModelValidationError

from shared.errors import StorageError, StorageNotFoundError
from ..models import Agent
from .base import AgentStore

logger = logging.getLogger(__name__)

AGENT_KEY_PREFIX = "agent:"
AGENT_INDEX_KEY = "agents:all"

class RedisAgentStore(AgentStore):
    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 password: Optional[str] = None, client: Optional[redis.Redis] = None):
        self.redis_client = client or redis.Redis(
            host=host,
            port=port,
            db=db,
            password=password,
            decode_responses=True
        )

    @staticmethod
    def _agent_key(agent_id: str) -> str:
        return f"{AGENT_KEY_PREFIX}{agent_id}"

    async def save_agent(self, agent: Agent) -> None:
        key = self._agent_key(agent.id)
        try:
            pipe = self.redis_client.pipeline()
            pipe.set(key, json.dumps(agent.model_dump(mode="json")))
            pipe.sadd(AGENT_INDEX_KEY, agent.id)
            pipe.execute()
        except redis.RedisError as e:
            raise StorageError("write", key, str(e))

    async def get_agent(self, agent_id: str) -> Agent:
        key = self._agent_key(agent_id)
        try:
            raw = self.redis_client.get(key)
        except redis.RedisError as e:
            raise StorageError("read", key, str(e))

        if raw is None:
            raise StorageNotFoundError(key)

        try:
            return Agent.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ModelValidationError) as e:
            raise StorageError("read", key, f"Invalid agent document: {e}")

    async def list_agents(self) -> List[Agent]:
        try:
            agent_ids = self.redis_client.smembers(AGENT_INDEX_KEY)
        except redis.RedisError as e:
            raise StorageError("list", AGENT_INDEX_KEY, str(e))

        agents = []
        for agent_id in sorted(agent_ids):
            try:
                agents.append(await self.get_agent(agent_id))
            except StorageNotFoundError:
                # Index entry without a record; drop it
                logger.warning(f"Removing stale agent index entry {agent_id}")
                try:
                    self.redis_client.srem(AGENT_INDEX_KEY, agent_id)
                except redis.RedisError as e:
                    raise StorageError("delete", AGENT_INDEX_KEY, str(e))
        return agents

    async def delete_agent(self, agent_id: str) -> None:
        key = self._agent_key(agent_id)
        try:
            removed = self.redis_client.delete(key)
            self.redis_client.srem(AGENT_INDEX_KEY, agent_id)
        except redis.RedisError as e:
            raise StorageError("delete", key, str(e))

        if not removed:
            raise StorageNotFoundError(key)

    async def ping(self) -> bool:
        try:
            return bool(self.redis_client.ping())
        except redis.RedisError as e:
            raise StorageError("ping", f"{AGENT_KEY_PREFIX}*", str(e))
