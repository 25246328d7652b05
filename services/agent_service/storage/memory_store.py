# memory_store.py - In-process agent store
# This file keeps agents in a dict; used by tests and the "memory" storage backend.
# Records are deep-copied on save and on every read.

from typing import Dict, List

from shared.errors import StorageNotFoundError
from ..models import Agent
from .base import AgentStore

class InMemoryAgentStore(AgentStore):
    def __init__(self):
        self._agents: Dict[str, Agent] = {}

    async def save_agent(self, agent: Agent) -> None:
        self._agents[agent.id] = agent.model_copy(deep=True)

    async def get_agent(self, agent_id: str) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise StorageNotFoundError(f"agents/{agent_id}")
        return agent.model_copy(deep=True)

    async def list_agents(self) -> List[Agent]:
        return [agent.model_copy(deep=True) for agent in self._agents.values()]

    async def delete_agent(self, agent_id: str) -> None:
        if agent_id not in self._agents:
            raise StorageNotFoundError(f"agents/{agent_id}")
        del self._agents[agent_id]
