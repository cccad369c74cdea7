"""
traitsearch/main.py

FastAPI application entrypoint.
- Creates the FastAPI app instance from the runtime config.
- Loads every catalog in the lifespan, so a broken data file stops startup.
- Registers routers (health, traits endpoints, perk search) under /api.
- Adds CORS for browser preflights; handlers also set the headers themselves.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from traitsearch.factory import build_services, load_runtime_config
from traitsearch.routers import health, perks, traits
from traitsearch.settings import settings

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(cfg_path: str | Path | None = None, data_dir: str | Path | None = None) -> FastAPI:
    cfg = load_runtime_config(cfg_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.services = build_services(cfg, data_dir=data_dir)
        logger.info("Catalogs ready: %s", app.state.services.catalog_sizes())
        yield

    app = FastAPI(
        title="Trait Search API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Root: be nice during dev instead of 404ing
    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/docs")

    # Quick ping that doesn't depend on the catalogs
    @app.get("/api/ping", include_in_schema=False)
    def ping():
        return JSONResponse({"status": "ok", "service": "trait-search", "version": "0.1.0"})

    app.include_router(health.router, prefix="/api")
    app.include_router(traits.build_router(cfg.endpoints), prefix="/api")
    if cfg.perks is not None:
        app.include_router(perks.build_router(cfg.perks.path), prefix="/api")
    return app


configure_logging()
app = create_app()
