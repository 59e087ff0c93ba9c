# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Structured Logging — JSON format with request and tenant context.

Records may carry context through ``extra``. A ``tenant_id`` passed
explicitly as None is rendered as ``"platform"``: the request ran without
a tenant, which is different from a record that has no tenant context.
"""

from __future__ import annotations

import json
import logging
import sys

PLATFORM_TENANT = "platform"

_CONTEXT_FIELDS = ("trace_id", "user_id", "path", "stamp_policy")


class StructuredFormatter(logging.Formatter):
    """JSON log formatter with trace/tenant/user context."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "tenant_id"):
            log_entry["tenant_id"] = _render_tenant(record.tenant_id)
        for key in _CONTEXT_FIELDS:
            val = getattr(record, key, None)
            if val:
                log_entry[key] = str(val)

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False)


def _render_tenant(tenant_id) -> str:
    if tenant_id is None or getattr(tenant_id, "int", None) == 0:
        return PLATFORM_TENANT
    return str(tenant_id)


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging for the service."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
