# fireaudit/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import init_db
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.auth import router as auth_router
from .routers.audit import router as audit_router
from .routers.clients import router as clients_router
from .routers.inspections import router as inspections_router
from .routers.dashboard import router as dashboard_router
from .routers.notifications import router as notifications_router

API_PREFIX = "/api"


def _cors_origins() -> list[str]:
    val = settings.cors_allow_origins
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # local / test databases are created in place; deployed ones go through alembic
    if settings.app_env in ("local", "test"):
        init_db()
    yield


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="FireAudit Compliance Engine", version=settings.app_version, lifespan=lifespan)

    # Request-ID first so the access line can carry it
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Core
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(audit_router, prefix=API_PREFIX)

    # Buildings + audits
    app.include_router(clients_router, prefix=API_PREFIX)
    app.include_router(inspections_router, prefix=API_PREFIX)

    # Scheduling views
    app.include_router(dashboard_router, prefix=API_PREFIX)
    app.include_router(notifications_router, prefix=API_PREFIX)

    return app


app = create_app()
