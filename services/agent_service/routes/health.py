# health.py - Health check endpoints
# This file defines endpoints for checking the health of the agent_service.

from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from shared.errors import ServiceError
from ..agent_directory import AgentDirectory
from ..config import settings
from .agents import get_directory, get_dispatcher
from ..task_dispatcher import TaskDispatcher

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": "1.0.0"
    }

@router.get("/detailed")
async def detailed_health_check(
    directory: AgentDirectory = Depends(get_directory),
    dispatcher: TaskDispatcher = Depends(get_dispatcher)
):
    """Detailed health check including storage and task handler status."""
    storage_error = None
    try:
        await directory.store.ping()
        agent_count = len(await directory.list())
    except ServiceError as e:
        storage_error = e.message
        agent_count = None

    return {
        "status": "healthy" if storage_error is None else "degraded",
        "service": settings.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "storage": {
                "status": "healthy" if storage_error is None else "unhealthy",
                "backend": settings.storage_backend,
                "error": storage_error,
                "total_agents": agent_count
            },
            "task_handlers": {
                "registered": [t.value for t in dispatcher.registry.task_types()],
                "executable": [
                    t.value for t in dispatcher.registry.task_types()
                    if dispatcher.registry.get_executor(t) is not None
                ]
            }
        }
    }
