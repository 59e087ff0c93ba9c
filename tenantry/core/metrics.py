# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.

"""
Metrics — In-memory counters for tenancy observability.

Tracks how requests resolve (tenant / platform / anomalous / malformed),
isolation-core failures by error code, and request latency.
"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Dict

RESOLVED = "resolved"
PLATFORM = "platform"
MISSING_CLAIM = "missing_claim"
MALFORMED_CLAIM = "malformed_claim"

_MAX_OBSERVATIONS = 1000


class Metrics:
    """Simple in-memory metrics collector."""

    def __init__(self):
        self._counters: Dict[str, int] = defaultdict(int)
        self._histograms: Dict[str, list] = defaultdict(list)
        self._start_time = time.time()

    def inc(self, name: str, amount: int = 1) -> None:
        self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def record_resolution(self, outcome: str) -> None:
        """Count one tenant resolution by outcome."""
        self.inc(f"tenant_resolution:{outcome}")

    def record_isolation_error(self, code: str) -> None:
        self.inc(f"isolation_error:{code}")

    def observe(self, name: str, value: float) -> None:
        """Record an observation (e.g. request time in ms)."""
        values = self._histograms[name]
        values.append(value)
        if len(values) > _MAX_OBSERVATIONS:
            del values[:-_MAX_OBSERVATIONS]

    def snapshot(self) -> Dict[str, Any]:
        """Export all metrics as a dict."""
        result = {
            "uptime_seconds": round(time.time() - self._start_time, 1),
            "counters": dict(self._counters),
        }
        for name, values in self._histograms.items():
            if values:
                result[f"histogram_{name}"] = {
                    "count": len(values),
                    "avg": round(sum(values) / len(values), 2),
                    "max": round(max(values), 2),
                }
        return result


# Global singleton
tenancy_metrics = Metrics()
