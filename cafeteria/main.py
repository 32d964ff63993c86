from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cafeteria.api.routes_auth import router as auth_router
from cafeteria.api.routes_dashboard import router as dashboard_router
from cafeteria.api.routes_demo import router as demo_router
from cafeteria.api.routes_orders import router as orders_router
from cafeteria.api.routes_products import router as products_router
from cafeteria.core.config import Settings, get_settings
from cafeteria.core.errors import StorageUnavailableError
from cafeteria.core.logging import configure_logging
from cafeteria.demo.seed import seed_demo_data
from cafeteria.persistence.db import Database

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        database.init_schema()
        if settings.seed_demo_on_startup:
            with database.session_scope() as session:
                result = seed_demo_data(session)
            logger.info("demo data seeded on startup: orders_created=%s", result["orders_created"])
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(_: Request, exc: StorageUnavailableError):
        return JSONResponse(
            status_code=503,
            content={
                "detail": str(exc),
                "error": "storage_unavailable",
            },
        )

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(orders_router)
    app.include_router(dashboard_router)
    app.include_router(demo_router)
    return app


configure_logging()
app = create_app()
