"""FastAPI app entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.db.init_db import init_models
from app.db.session import engine
from app.routers import channels, feed, settings as settings_router, watched


def create_app() -> FastAPI:
    """Build FastAPI application."""

    app = FastAPI(title="Channel Feed", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.dashboard_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(channels.router)
    app.include_router(feed.router)
    app.include_router(watched.router)
    app.include_router(settings_router.router)

    @app.on_event("startup")
    async def _startup() -> None:
        await init_models(engine)

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
