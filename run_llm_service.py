#!/usr/bin/env python3
import sys
import os

# Add the project root to Python path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

if __name__ == "__main__":
    import uvicorn
    from services.llm_service.main import app, settings

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.llm_service_port,
        reload=False,  # Set to True for development
        log_level=settings.llm_log_level.lower()
    )
