from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from life_dashboards.db import dispose_engine
from life_dashboards.db_init import init_db
from life_dashboards.routes import dashboard, files, heatmap, journal, profile
from life_dashboards.schemas import HealthResponse
from life_dashboards.settings import get_settings


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="Life Dashboards", version="0.1.0")

    @app.middleware("http")
    async def _strip_trailing_slash(request: Request, call_next):
        path = request.scope["path"]
        if len(path) > 1 and path.endswith("/"):
            request.scope["path"] = path.rstrip("/") or "/"
        return await call_next(request)

    @app.on_event("startup")
    async def _startup():
        await init_db()

    @app.on_event("shutdown")
    async def _shutdown():
        await dispose_engine()

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("life_dashboards").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return {"ok": True}

    app.include_router(heatmap.router)
    app.include_router(journal.router)
    app.include_router(files.router)
    app.include_router(profile.router)

    app.mount(
        "/uploads/avatars",
        StaticFiles(directory=str(settings.avatars_dir), check_dir=False),
        name="avatars",
    )

    # Catch-all: must stay after every other route and mount.
    app.include_router(dashboard.router)

    return app


app = create_app()
