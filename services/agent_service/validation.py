# validation.py - Agent validation rules
# This file contains the pure checks applied to agent names, descriptions and configurations.

import re
from typing import Optional

from shared.errors import AgentConfigurationError, ValidationError
from .models import AgentConfig, Task
from .task_types.registry import TaskHandlerRegistry, build_default_registry

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

TIMEOUT_MIN_MS = 1000
TIMEOUT_MAX_MS = 3600000
RETRY_MAX_RETRIES_MIN = 0
RETRY_MAX_RETRIES_MAX = 10
RETRY_DELAY_MIN_MS = 100
RETRY_DELAY_MAX_MS = 60000

def _registry(registry: Optional[TaskHandlerRegistry]) -> TaskHandlerRegistry:
    return registry if registry is not None else build_default_registry()

def validate_name(name: str) -> None:
    if not name or not name.strip():
        raise ValidationError("name", "Agent name cannot be empty", name)

    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError("name", f"Agent name cannot exceed {NAME_MAX_LENGTH} characters", name)

    if not NAME_PATTERN.match(name):
        raise ValidationError(
            "name",
            "Agent name can only contain letters, numbers, underscores, and hyphens",
            name,
        )

def validate_description(description: str) -> None:
    if not description or not description.strip():
        raise ValidationError("description", "Agent description cannot be empty", description)

    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            "description",
            f"Agent description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
            description,
        )

def validate_task(task: Task, registry: Optional[TaskHandlerRegistry] = None) -> None:
    handler = _registry(registry).get(task.type)
    if handler is None:
        raise AgentConfigurationError(
            agent_id="unknown",
            field=f"task.{task.id}.type",
            message=f"No handler registered for task type: {task.type.value}",
        )
    handler.validate(task)

def validate_agent_config(config: AgentConfig, registry: Optional[TaskHandlerRegistry] = None,
                          agent_id: str = "unknown") -> None:
    """Check a full agent configuration, stopping at the first violation."""
    registry = _registry(registry)
    try:
        for task in config.tasks:
            validate_task(task, registry)
    except AgentConfigurationError as e:
        if agent_id != "unknown":
            e.agent_id = agent_id
        raise

    if config.timeout is not None and not TIMEOUT_MIN_MS <= config.timeout <= TIMEOUT_MAX_MS:
        raise AgentConfigurationError(
            agent_id=agent_id,
            field="timeout",
            message=f"Timeout must be between {TIMEOUT_MIN_MS}ms and {TIMEOUT_MAX_MS}ms (1 hour)",
        )

    policy = config.retry_policy
    if policy is not None:
        if not RETRY_MAX_RETRIES_MIN <= policy.max_retries <= RETRY_MAX_RETRIES_MAX:
            raise AgentConfigurationError(
                agent_id=agent_id,
                field="retry_policy.max_retries",
                message=f"Max retries must be between {RETRY_MAX_RETRIES_MIN} and {RETRY_MAX_RETRIES_MAX}",
            )

        if not RETRY_DELAY_MIN_MS <= policy.delay <= RETRY_DELAY_MAX_MS:
            raise AgentConfigurationError(
                agent_id=agent_id,
                field="retry_policy.delay",
                message=f"Retry delay must be between {RETRY_DELAY_MIN_MS}ms and {RETRY_DELAY_MAX_MS}ms",
            )
