# agent_directory.py - Core agent management logic
# This file contains the logic for creating, retrieving, updating and deleting agents.

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as ModelValidationError

from shared.errors import AgentAlreadyExistsError, AgentConfigurationError, ValidationError
from .models import Agent, AgentConfig, AgentStatus, generate_id, utc_now
from .storage.base import AgentStore
from .task_types.registry import TaskHandlerRegistry
from .validation import validate_agent_config, validate_description, validate_name

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000

class AgentDirectory:
    """Agent lifecycle on top of an injected store.

    Name uniqueness is checked against `list_agents()` before the write, with no
    transaction around the two steps: two concurrent creates with the same name
    can both pass the check. Callers needing a hard guarantee must serialize
    creation.
    """

    def __init__(self, store: AgentStore, registry: Optional[TaskHandlerRegistry] = None,
                 default_timeout: int = DEFAULT_TIMEOUT_MS):
        self.store = store
        self.registry = registry
        self.default_timeout = default_timeout

    def _merge_config(self, partial_config: Optional[Dict[str, Any]]) -> AgentConfig:
        partial = dict(partial_config or {})
        environment = dict(partial.pop("environment", None) or {})
        merged = {
            "tasks": [],
            "timeout": self.default_timeout,
            **partial,
            "environment": environment,
        }
        if merged.get("tasks") is None:
            merged["tasks"] = []

        try:
            return AgentConfig.model_validate(merged)
        except ModelValidationError as e:
            raise _config_structure_error(e, merged["tasks"])

    async def create(self, name: str, description: str,
                     partial_config: Optional[Dict[str, Any]] = None) -> Agent:
        """Validate, check name uniqueness, then persist a new idle agent."""
        validate_name(name)
        validate_description(description)

        config = self._merge_config(partial_config)
        validate_agent_config(config, self.registry)

        existing_agents = await self.store.list_agents()
        if any(agent.name == name for agent in existing_agents):
            raise AgentAlreadyExistsError(agent_id=name)

        now = utc_now()
        agent = Agent(
            id=generate_id(),
            name=name,
            description=description,
            config=config,
            status=AgentStatus.IDLE,
            created_at=now,
            updated_at=now,
        )

        await self.store.save_agent(agent)
        logger.info(f"Created agent {agent.id} ({agent.name}) with {len(config.tasks)} task(s)")
        return agent

    async def get(self, agent_id: str) -> Agent:
        return await self.store.get_agent(agent_id)

    async def list(self) -> List[Agent]:
        return await self.store.list_agents()

    async def update(self, agent_id: str, changes: Dict[str, Any]) -> Agent:
        """Overlay `changes` on the stored agent. The merged config is not re-validated."""
        existing = await self.store.get_agent(agent_id)

        data = existing.model_dump()
        data.update(changes)
        data["id"] = existing.id
        data["created_at"] = existing.created_at
        data["updated_at"] = utc_now()

        try:
            updated = Agent.model_validate(data)
        except ModelValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(field, f"Invalid agent update: {first['msg']}", first.get("input"))

        await self.store.save_agent(updated)
        logger.info(f"Updated agent {agent_id}: {sorted(changes.keys())}")
        return updated

    async def delete(self, agent_id: str) -> None:
        await self.store.delete_agent(agent_id)
        logger.info(f"Deleted agent {agent_id}")

def _config_structure_error(error: ModelValidationError, tasks: Any) -> AgentConfigurationError:
    """Turn the first schema violation of a partial config into an AgentConfigurationError."""
    first = error.errors()[0]
    loc = list(first["loc"])

    if len(loc) >= 2 and loc[0] == "tasks" and isinstance(loc[1], int):
        task_id = str(loc[1])
        if isinstance(tasks, list) and loc[1] < len(tasks):
            raw_task = tasks[loc[1]]
            raw_id = raw_task.get("id") if isinstance(raw_task, dict) else getattr(raw_task, "id", None)
            if raw_id:
                task_id = str(raw_id)
        field = ".".join(["task", task_id] + [str(part) for part in loc[2:]])
        return AgentConfigurationError("unknown", field, f"Invalid task structure: {first['msg']}")

    field = ".".join(str(part) for part in loc) or "config"
    return AgentConfigurationError("unknown", field, f"Invalid agent configuration: {first['msg']}")
