"""FastAPI application factory.

The database is opened by the lifespan handler and closed on shutdown;
every request gets its own unit of work.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic.application.clock import Clock, utcnow
from clinic.infrastructure import bootstrap
from clinic.infrastructure.api.errors import install_error_handlers
from clinic.infrastructure.api.routes import invoices, patients, products, stats, vouchers
from clinic.infrastructure.config import Settings


def create_app(settings: Settings | None = None, clock: Clock = utcnow) -> FastAPI:
    settings = settings or Settings.from_env()
    database = bootstrap.database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="Clinic Billing API", lifespan=lifespan)
    app.state.database = database
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    @app.get("/api/health")
    def health():
        return {"ok": True, "service": "clinic", "time": clock().isoformat()}

    app.include_router(invoices.router)
    app.include_router(vouchers.router)
    app.include_router(products.router)
    app.include_router(patients.router)
    app.include_router(stats.router)
    return app
