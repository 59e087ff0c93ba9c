# Copyright (c) 2026 Tenantry Contributors. All Rights Reserved.
"""Unit tests for Metrics."""

from tenantry.core.metrics import MISSING_CLAIM, RESOLVED, Metrics


class TestMetrics:
    def test_counter_increment(self):
        m = Metrics()
        m.inc("requests")
        m.inc("requests")
        assert m.get_counter("requests") == 2

    def test_counter_default_zero(self):
        assert Metrics().get_counter("nonexistent") == 0

    def test_resolution_outcomes(self):
        m = Metrics()
        m.record_resolution(RESOLVED)
        m.record_resolution(RESOLVED)
        m.record_resolution(MISSING_CLAIM)
        counters = m.snapshot()["counters"]
        assert counters["tenant_resolution:resolved"] == 2
        assert counters["tenant_resolution:missing_claim"] == 1

    def test_isolation_errors(self):
        m = Metrics()
        m.record_isolation_error("TENANT_CONTEXT_MISSING")
        assert m.get_counter("isolation_error:TENANT_CONTEXT_MISSING") == 1

    def test_observe(self):
        m = Metrics()
        m.observe("request_ms", 100)
        m.observe("request_ms", 200)
        snap = m.snapshot()
        assert snap["histogram_request_ms"]["avg"] == 150.0
        assert snap["histogram_request_ms"]["count"] == 2

    def test_observe_keeps_recent_window(self):
        m = Metrics()
        for i in range(1500):
            m.observe("request_ms", i)
        assert m.snapshot()["histogram_request_ms"]["count"] == 1000
