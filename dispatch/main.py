# main.py

"""
Roadside Dispatch API - Main Entry Point
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dispatch.core.config import Settings, settings as default_settings
from dispatch.routers import admin_router, event_router, job_router, technician_router
from dispatch.services.dispatch_engine import DispatchEngine


def create_app(config: Optional[Settings] = None, engine: Optional[DispatchEngine] = None) -> FastAPI:
    config = config or default_settings
    logging.basicConfig(level=config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.engine.shutdown()

    # Create FastAPI app
    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        debug=config.debug,
        lifespan=lifespan
    )
    app.state.engine = engine or DispatchEngine(config)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(job_router.router)
    app.include_router(technician_router.router)
    app.include_router(admin_router.router)
    app.include_router(event_router.router)

    @app.get("/")
    async def root():
        """API root endpoint"""
        return {
            "name": config.app_name,
            "version": config.app_version,
            "endpoints": {
                "quote": "/api/jobs/quote",
                "jobs": "/api/jobs",
                "active_job": "/api/jobs/active",
                "tracking": "/api/jobs/active/tracking",
                "job_events": "/api/jobs/{job_id}/events",
                "history": "/api/jobs/history",
                "technician": "/api/technician",
                "admin": "/api/admin/overview",
                "events": "/ws/events",
                "health": "/health",
                "docs": "/docs"
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "version": config.app_version
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dispatch.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=True
    )
