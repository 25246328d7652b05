# base_task.py - Abstract base class for task handlers
# This file defines the interface every task type implements: config validation and execution.

from abc import ABC
from typing import Any, Optional

from shared.errors import AgentConfigurationError
from ..models import Task, TaskType, TaskResult

class BaseTaskHandler(ABC):
    """One task type: how its config is validated and, when supported, how it runs.

    Handlers that leave `executable` False are placeholders; the dispatcher
    records their tasks as skipped instead of calling `execute`.
    """

    task_type: TaskType
    executable: bool = False

    def validate(self, task: Task) -> None:
        """Raise AgentConfigurationError on the first problem found."""
        if not task.name or not task.name.strip():
            raise AgentConfigurationError(
                agent_id="unknown",
                field=f"task.{task.id}.name",
                message="Task name cannot be empty",
            )
        self.validate_config(task)

    def validate_config(self, task: Task) -> None:
        pass

    async def execute(self, task: Task) -> TaskResult:
        raise NotImplementedError(f"Task type '{self.task_type.value}' is not yet implemented")

    @staticmethod
    def require_text(task: Task, key: str, message: str) -> str:
        value: Optional[Any] = task.config.get(key)
        if not isinstance(value, str) or not value.strip():
            raise AgentConfigurationError(
                agent_id="unknown",
                field=f"task.{task.id}.config.{key}",
                message=message,
            )
        return value
