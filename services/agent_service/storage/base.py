# base.py - Agent store interface
# This file defines the persistence capability the agent directory depends on.

from abc import ABC, abstractmethod
from typing import List

from ..models import Agent

class AgentStore(ABC):
    """Single-record persistence for agents.

    Each operation is atomic for one record only; there is no multi-record
    transaction. Failures surface as StorageError, missing records as
    StorageNotFoundError.
    """

    @abstractmethod
    async def save_agent(self, agent: Agent) -> None:
        pass

    @abstractmethod
    async def get_agent(self, agent_id: str) -> Agent:
        pass

    @abstractmethod
    async def list_agents(self) -> List[Agent]:
        pass

    @abstractmethod
    async def delete_agent(self, agent_id: str) -> None:
        pass

    async def ping(self) -> bool:
        return True
