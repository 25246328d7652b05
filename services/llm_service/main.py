# main.py - FastAPI app entry point for the llm_service
# This file initializes and runs the FastAPI application for chat completions.

import logging
import sys
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
import uvicorn

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from services.llm_service.config import LLMSettings
from services.llm_service.gateway import LLMGateway
from services.llm_service.routes import completions
from services.llm_service.tools import ToolRegistry

settings = LLMSettings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.llm_log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info(f"Starting {settings.llm_service_name} on port {settings.llm_service_port}")

    # Fails startup when no provider credential is set
    app.state.gateway = LLMGateway(settings)
    app.state.tools = ToolRegistry()

    yield

    await app.state.gateway.aclose()
    logger.info("LLM service shutdown complete")

app = FastAPI(
    title="LLM Service",
    description="Provider-agnostic chat completion gateway",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(completions.router)

@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": settings.llm_service_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs"
    }

@app.get("/health/")
async def health_check():
    """Basic health check endpoint."""
    providers = app.state.gateway.list_providers() if hasattr(app.state, "gateway") else []
    return {
        "status": "healthy" if providers else "degraded",
        "service": settings.llm_service_name,
        "providers": providers,
        "backend": settings.llm_backend,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.llm_service_port,
        reload=True,
        log_level=settings.llm_log_level.lower()
    )
