"""FastAPI application factory.

Main entry point for the coaching dashboard Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coaching import __version__
from coaching.core.roster import RosterStore
from coaching.web.routes import health_router, records_router, students_router
from coaching.web.store import open_configured_store

logger = structlog.get_logger(__name__)


def create_app(store: RosterStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Roster store to serve. Defaults to the configured storage,
            opened at startup and closed (final save) at shutdown.

    Returns:
        Configured FastAPI app instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Open the roster at startup, save it at shutdown."""
        if getattr(app.state, "store", None) is None:
            app.state.store = open_configured_store()
        logger.info("api_startup", students=len(app.state.store))
        yield
        app.state.store.close()
        logger.info("api_shutdown")

    app = FastAPI(
        title="YKS Coaching API",
        description="Web API for the YKS coaching dashboard",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.store = store

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(students_router)
    app.include_router(records_router)

    return app


# Default app instance for uvicorn
app = create_app()
