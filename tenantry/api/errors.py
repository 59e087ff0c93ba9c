# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
API Error Handling — Unified error structure.

Business errors are APIError subclasses. Isolation-core failures
(TenancyError) are server misconfiguration and always map to 500; they are
never reported as "not found".
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from tenantry.core.errors import TenancyError
from tenantry.core.metrics import tenancy_metrics

logger = logging.getLogger("tenantry.api")


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.trace_id = trace_id
        super().__init__(message)


class RecordNotFoundError(APIError):
    """Missing, or owned by another tenant. The two are deliberately identical."""

    def __init__(self, entity: str, record_id: Any, trace_id: str = None):
        super().__init__(
            code="RECORD_NOT_FOUND",
            message=f"{entity} '{record_id}' not found",
            status_code=404,
            trace_id=trace_id,
        )


class DuplicateRecordError(APIError):
    def __init__(self, entity: str, field: str, value: Any, trace_id: str = None):
        super().__init__(
            code="DUPLICATE_RECORD",
            message=f"{entity} with {field} '{value}' already exists",
            status_code=409,
            trace_id=trace_id,
        )


def _trace_id(request: Request, fallback: Optional[str] = None) -> str:
    return fallback or getattr(request.state, "trace_id", None) or str(uuid.uuid4())


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Global exception handler for APIError."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": exc.message,
            "trace_id": _trace_id(request, exc.trace_id),
            "details": exc.details,
        },
    )


async def tenancy_error_handler(request: Request, exc: TenancyError) -> JSONResponse:
    """Global exception handler for isolation-core failures."""
    trace_id = _trace_id(request)
    tenancy_metrics.record_isolation_error(exc.code)
    logger.error(
        "Isolation failure %s on %s %s: %s",
        exc.code, request.method, request.url.path, exc,
        extra={"trace_id": trace_id, "path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content={
            "code": exc.code,
            "message": "The server's tenant configuration rejected this operation",
            "trace_id": trace_id,
            "details": {},
        },
    )
