# agents.py - Agent CRUD and run endpoints
# This file defines the API endpoints for managing and running agents.

from fastapi import APIRouter, HTTPException, Depends, Request
from typing import Any, Dict, List, Union
import logging

from shared.errors import (
    AgentAlreadyExistsError, AgentConfigurationError, ServiceError,
    StorageNotFoundError, ValidationError
)
from ..agent_directory import AgentDirectory
from ..models import (
    Agent, AgentCreateRequest, AgentResult, AgentRunPlan, AgentUpdateRequest,
    BackoffStrategy
)
from ..task_dispatcher import TaskDispatcher

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/agents", tags=["agents"])

# Defaults applied when only part of a retry policy is supplied
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1000

def get_directory(request: Request) -> AgentDirectory:
    if not hasattr(request.app.state, "directory"):
        raise HTTPException(status_code=500, detail="Agent directory not initialized")
    return request.app.state.directory

def get_dispatcher(request: Request) -> TaskDispatcher:
    if not hasattr(request.app.state, "dispatcher"):
        raise HTTPException(status_code=500, detail="Task dispatcher not initialized")
    return request.app.state.dispatcher

def to_http_error(error: ServiceError) -> HTTPException:
    if isinstance(error, (ValidationError, AgentConfigurationError)):
        status_code = 400
    elif isinstance(error, StorageNotFoundError):
        status_code = 404
    elif isinstance(error, AgentAlreadyExistsError):
        status_code = 409
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail=error.to_dict())

def build_partial_config(request_data: AgentCreateRequest) -> Dict[str, Any]:
    config: Dict[str, Any] = {
        "tasks": request_data.tasks,
        "environment": request_data.environment,
    }

    if request_data.timeout:
        config["timeout"] = request_data.timeout

    if (request_data.max_retries is not None or request_data.retry_delay is not None
            or request_data.retry_backoff):
        config["retry_policy"] = {
            "max_retries": (request_data.max_retries
                            if request_data.max_retries is not None else DEFAULT_MAX_RETRIES),
            "delay": request_data.retry_delay if request_data.retry_delay is not None else DEFAULT_RETRY_DELAY,
            "backoff": request_data.retry_backoff or BackoffStrategy.EXPONENTIAL,
        }

    return config

@router.post("/", response_model=Agent)
async def create_agent(
    request_data: AgentCreateRequest,
    directory: AgentDirectory = Depends(get_directory)
):
    """Create a new agent."""
    description = request_data.description
    if description is None:
        description = f"Agent for {request_data.name}"

    try:
        agent = await directory.create(
            request_data.name, description, build_partial_config(request_data)
        )
    except ServiceError as e:
        logger.error(f"Failed to create agent {request_data.name}: {e.message}")
        raise to_http_error(e)

    return agent

@router.get("/", response_model=List[Agent])
async def list_agents(directory: AgentDirectory = Depends(get_directory)):
    """List all agents."""
    try:
        return await directory.list()
    except ServiceError as e:
        logger.error(f"Failed to list agents: {e.message}")
        raise to_http_error(e)

@router.get("/{agent_id}", response_model=Agent)
async def get_agent(agent_id: str, directory: AgentDirectory = Depends(get_directory)):
    """Get specific agent details, including every task's configuration."""
    try:
        return await directory.get(agent_id)
    except ServiceError as e:
        raise to_http_error(e)

@router.patch("/{agent_id}", response_model=Agent)
async def update_agent(
    agent_id: str,
    request_data: AgentUpdateRequest,
    directory: AgentDirectory = Depends(get_directory)
):
    """Update an agent. Identifier and creation time cannot change; null fields are ignored."""
    changes = request_data.model_dump(exclude_unset=True, exclude_none=True)
    try:
        return await directory.update(agent_id, changes)
    except ServiceError as e:
        logger.error(f"Failed to update agent {agent_id}: {e.message}")
        raise to_http_error(e)

@router.delete("/{agent_id}")
async def delete_agent(agent_id: str, directory: AgentDirectory = Depends(get_directory)):
    """Delete an agent."""
    try:
        agent = await directory.get(agent_id)
        await directory.delete(agent_id)
    except ServiceError as e:
        raise to_http_error(e)

    return {"message": f"Agent {agent.name} deleted successfully", "agent_id": agent.id}

@router.post("/{agent_id}/run", response_model=Union[AgentResult, AgentRunPlan])
async def run_agent(
    agent_id: str,
    dry_run: bool = False,
    watch: bool = False,
    directory: AgentDirectory = Depends(get_directory),
    dispatcher: TaskDispatcher = Depends(get_dispatcher)
):
    """Run an agent's tasks, or return the task plan when dry_run is set."""
    try:
        agent = await directory.get(agent_id)
    except ServiceError as e:
        raise to_http_error(e)

    if dry_run:
        logger.info(f"Dry run for agent {agent_id}: {len(agent.config.tasks)} task(s)")
        return dispatcher.plan(agent)

    if watch:
        logger.info(f"Watch mode requested for agent {agent_id}; running once")

    return await dispatcher.run(agent)
