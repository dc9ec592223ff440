"""
Module 08 - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import (
    APIError,
    anchor_error_handler,
    api_error_handler,
    generic_error_handler,
)
from api.routes import checkpoints, diff, health, verify
from core.schemas.errors import AnchorException


logging.basicConfig(
    level=getattr(logging, os.getenv("ANCHOR_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Memory Anchor API",
        description="""
HTTP API over the local checkpoint store.

## Endpoints

- **GET /checkpoints** - List stored checkpoints
- **GET /checkpoints/{id}** - Full checkpoint record
- **GET /checkpoints/{id}/proof?path=** - Inclusion proof for one file
- **POST /verify** - Verify a leaf, siblings and root
- **GET /diff?a=&b=** - Added, removed and modified paths between two checkpoints
- **GET /health** - Health check
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AnchorException, anchor_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(checkpoints.router)
    app.include_router(verify.router)
    app.include_router(diff.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
