# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Tenantry Application Entry Point.

FastAPI app with lifespan, middleware, error handlers and API routers.
The host's authentication middleware is expected to place VerifiedClaims on
request.state.claims before the routes run.

Entry point: uvicorn tenantry.main:app --host 0.0.0.0 --port 8000
(or python -m tenantry.main)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tenantry.core.config import settings
from tenantry.core.errors import TenancyError
from tenantry.core.logging import setup_logging
from tenantry.storage.database import close_db, init_db
from tenantry.storage.registry import TENANT_SCOPED_MODELS
from tenantry.api.errors import APIError, api_error_handler, tenancy_error_handler
from tenantry.api.middleware import TraceMiddleware
from tenantry.api.departments import router as departments_router
from tenantry.api.employees import router as employees_router
from tenantry.api.observability import router as observability_router

logger = logging.getLogger("tenantry.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup/shutdown of service resources."""
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    logger.info(
        "[Tenantry] Ready: %d tenant-scoped models, stamp policy %s",
        len(TENANT_SCOPED_MODELS), settings.TENANT_STAMP_POLICY.value,
    )
    yield
    await close_db()
    logger.info("[Tenantry] Shutdown complete")


app = FastAPI(
    title="Tenantry",
    description="Multi-tenant HR backend with enforced tenant isolation",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(TraceMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Error Handlers ──────────────────────────────────────────
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(TenancyError, tenancy_error_handler)

# ── Routes ──────────────────────────────────────────────────
app.include_router(departments_router, prefix="/api")
app.include_router(employees_router, prefix="/api")
app.include_router(observability_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tenantry.main:app", host="0.0.0.0", port=8000)
