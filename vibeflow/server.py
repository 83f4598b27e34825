"""FastAPI server for VibeFlow.

Run with: vibeflow-server --port 3001
"""

from __future__ import annotations

import argparse
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vibeflow.config import get_settings
from vibeflow.routes.jury import router as jury_router
from vibeflow.routes.project import router as project_router
from vibeflow.routes.reasoning import router as reasoning_router

SERVICE_NAME = "VibeFlow Jury Mode API"

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="vibeflow",
        version="0.1.0",
        description="Project visualization and AI jury service",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register route modules.
    app.include_router(project_router)
    app.include_router(jury_router)
    app.include_router(reasoning_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": SERVICE_NAME}

    return app


app = create_app()


def main():
    parser = argparse.ArgumentParser(description="VibeFlow server")
    parser.add_argument("--port", type=int, default=3001, help="Port to listen on")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = get_settings()
    logger.info(
        f"Rate limits: {settings.rate_per_minute} RPM, {settings.rate_per_day} RPD "
        f"(provider: {settings.provider})"
    )

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="info",
        access_log=False,
    )


if __name__ == "__main__":
    main()
