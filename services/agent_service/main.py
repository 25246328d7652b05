# main.py - FastAPI app entry point for the agent_service
# This file initializes and runs the FastAPI application for agent management.

import logging
import sys
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from services.agent_service.config import settings
from services.agent_service.routes import agents, health
from services.agent_service.agent_directory import AgentDirectory
from services.agent_service.task_dispatcher import TaskDispatcher
from services.agent_service.task_types.registry import build_default_registry
from services.agent_service.storage.factory import create_store

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info(f"Starting {settings.service_name} on port {settings.service_port}")

    store = create_store(settings)
    await store.ping()
    logger.info(f"Agent store ready ({settings.storage_backend})")

    registry = build_default_registry()
    app.state.directory = AgentDirectory(
        store, registry, default_timeout=settings.default_agent_timeout
    )
    app.state.dispatcher = TaskDispatcher(registry)

    yield

    logger.info("Agent service shutdown complete")

# Create FastAPI app
app = FastAPI(
    title="Agent Service",
    description="Agent management and task execution service",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(agents.router)
app.include_router(health.router)

@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": settings.service_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
        "health": "/health"
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=True,
        log_level=settings.log_level.lower()
    )
