import logging
import sys
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.app_shell.context import SiteContext, build_context
from src.components.levels import run_fetch_config

logger = logging.getLogger(__name__)


def create_app(context_factory: Callable[[], SiteContext] = build_context) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        logging.basicConfig(level=logging.INFO)

        # Load rules and validate on startup (fail-fast)
        try:
            context = context_factory()
        except Exception as e:
            logger.critical("Site context build failed: %s", e)
            sys.exit(1)

        app.state.context = context
        result = await run_fetch_config(context.levels)
        logger.info("Level configuration %s", "loaded" if result.loaded else "using defaults")

        yield

        await context.aclose()
        app.state.context = None

    app = FastAPI(
        title="School Site API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # --- Routers ---
    from src.api.routes import admin_content, public

    app.include_router(admin_content.router, prefix="/api/admin", tags=["Admin Content"])
    app.include_router(public.router, prefix="/api", tags=["Public"])

    # CORS (Allow Frontend)
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "api"}

    return app


app = create_app()
