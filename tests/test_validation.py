"""Tests for agent name, description and configuration validation."""

import pytest

from services.agent_service.models import AgentConfig, RetryPolicy, Task, TaskType
from services.agent_service.validation import (
    validate_agent_config, validate_description, validate_name, validate_task
)
from shared.errors import AgentConfigurationError, ValidationError


# ============================================================================
# Names and descriptions
# ============================================================================


@pytest.mark.parametrize("name", ["mail-bot", "Agent_01", "a", "x" * 100])
def test_valid_names(name):
    validate_name(name)


@pytest.mark.parametrize(
    "name,fragment",
    [
        ("", "cannot be empty"),
        ("   ", "cannot be empty"),
        ("x" * 101, "cannot exceed 100"),
        ("bad name", "letters, numbers"),
        ("bot!", "letters, numbers"),
        ("dotted.name", "letters, numbers"),
    ],
)
def test_invalid_names(name, fragment):
    with pytest.raises(ValidationError) as exc_info:
        validate_name(name)

    assert exc_info.value.field == "name"
    assert exc_info.value.value == name
    assert fragment in exc_info.value.message


def test_description_bounds():
    validate_description("x" * 500)

    with pytest.raises(ValidationError) as exc_info:
        validate_description("x" * 501)
    assert exc_info.value.field == "description"

    with pytest.raises(ValidationError):
        validate_description("  ")


# ============================================================================
# Tasks
# ============================================================================


@pytest.mark.parametrize(
    "task_type,key",
    [
        (TaskType.COMMAND, "command"),
        (TaskType.SCRIPT, "script"),
        (TaskType.API, "url"),
        (TaskType.FILE, "file_path"),
    ],
)
def test_task_requires_type_specific_config(registry, task_type, key):
    task = Task(id="t1", name="Step", type=task_type, config={})

    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_task(task, registry)

    assert exc_info.value.field == f"task.t1.config.{key}"

    validate_task(Task(id="t1", name="Step", type=task_type, config={key: "value"}), registry)


@pytest.mark.parametrize("task_type", [TaskType.WEBHOOK, TaskType.CUSTOM])
def test_task_types_without_rules_accept_any_config(registry, task_type):
    validate_task(Task(id="t1", name="Step", type=task_type), registry)


def test_task_name_must_not_be_blank(registry):
    task = Task(id="t1", name="  ", type=TaskType.CUSTOM)

    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_task(task, registry)

    assert exc_info.value.field == "task.t1.name"


def test_mail_task_requires_known_operation(registry):
    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_task(Task(id="m", name="Mail", type=TaskType.MAIL), registry)
    assert exc_info.value.field == "task.m.config.mail_operation"

    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_task(
            Task(id="m", name="Mail", type=TaskType.MAIL, config={"mail_operation": "archive"}),
            registry,
        )
    assert "archive" in exc_info.value.message


def test_validate_task_without_registry_uses_builtin_handlers():
    validate_task(Task(name="Mail", type=TaskType.MAIL, config={"mail_operation": "send"}))


# ============================================================================
# Agent configuration
# ============================================================================


@pytest.mark.parametrize("timeout", [1000, 30000, 3600000])
def test_timeout_within_bounds(registry, timeout):
    validate_agent_config(AgentConfig(timeout=timeout), registry)


@pytest.mark.parametrize("timeout", [500, 999, 3600001])
def test_timeout_out_of_bounds(registry, timeout):
    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_agent_config(AgentConfig(timeout=timeout), registry, agent_id="a1")

    assert exc_info.value.field == "timeout"
    assert exc_info.value.agent_id == "a1"


@pytest.mark.parametrize("max_retries", [0, 10])
def test_max_retries_within_bounds(registry, max_retries):
    config = AgentConfig(retry_policy=RetryPolicy(max_retries=max_retries, delay=1000))
    validate_agent_config(config, registry)


@pytest.mark.parametrize("max_retries", [-1, 11])
def test_max_retries_out_of_bounds(registry, max_retries):
    config = AgentConfig(retry_policy=RetryPolicy(max_retries=max_retries, delay=1000))

    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_agent_config(config, registry)

    assert exc_info.value.field == "retry_policy.max_retries"


@pytest.mark.parametrize("delay,valid", [(99, False), (100, True), (60000, True), (60001, False)])
def test_retry_delay_bounds(registry, delay, valid):
    config = AgentConfig(retry_policy=RetryPolicy(max_retries=3, delay=delay))

    if valid:
        validate_agent_config(config, registry)
    else:
        with pytest.raises(AgentConfigurationError) as exc_info:
            validate_agent_config(config, registry)
        assert exc_info.value.field == "retry_policy.delay"


def test_first_invalid_task_is_reported(registry):
    config = AgentConfig(tasks=[
        Task(id="ok", name="Fine", type=TaskType.CUSTOM),
        Task(id="bad1", name="Broken", type=TaskType.API),
        Task(id="bad2", name="Also broken", type=TaskType.FILE),
    ])

    with pytest.raises(AgentConfigurationError) as exc_info:
        validate_agent_config(config, registry)

    assert exc_info.value.field == "task.bad1.config.url"
