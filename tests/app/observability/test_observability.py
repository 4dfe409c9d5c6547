"""Testes de correlation_id e métricas via logs."""

from __future__ import annotations

import logging

import pytest

from app.observability import (
    correlation_id_from_headers,
    get_correlation_id,
    record_delivery_attempt,
    record_ingestion_outcome,
    record_latency,
    record_publish_outcome,
    reset_correlation_id,
    set_correlation_id,
)

METRICS_LOGGER = "app.observability.metrics"


class TestCorrelationId:
    """ContextVar de correlation_id."""

    def test_set_and_reset(self) -> None:
        token = set_correlation_id("corr-1")
        try:
            assert get_correlation_id() == "corr-1"
        finally:
            reset_correlation_id(token)
        assert get_correlation_id() == ""

    def test_generates_when_missing(self) -> None:
        token = set_correlation_id(None)
        try:
            assert len(get_correlation_id()) == 36
        finally:
            reset_correlation_id(token)

    def test_from_headers_prefers_explicit_header(self) -> None:
        headers = {"x-correlation-id": "explicit", "x-cloudtasks-taskname": "task-1"}
        assert correlation_id_from_headers(headers) == "explicit"

    def test_from_headers_uses_task_name(self) -> None:
        assert correlation_id_from_headers({"x-cloudtasks-taskname": "task-1"}) == "task-1"
        assert correlation_id_from_headers({}) is None


class TestMetrics:
    """Métricas emitidas como logs com metric_type."""

    def test_latency_is_rounded(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger=METRICS_LOGGER):
            record_latency("queue_bridge", "publish_all", 12.3456)

        record = caplog.records[0]
        assert record.metric_type == "latency"
        assert record.latency_ms == 12.35

    def test_delivery_attempt(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger=METRICS_LOGGER):
            record_delivery_attempt("verification", 2, False, "out-1", status_code=503)

        record = caplog.records[0]
        assert record.metric_type == "delivery_attempt"
        assert record.attempt == 2
        assert record.success is False
        assert record.status_code == 503

    def test_publish_and_ingestion_outcomes(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger=METRICS_LOGGER):
            record_publish_outcome("M1", "deduplicated")
            record_ingestion_outcome("M1", "verified", True)

        assert [r.metric_type for r in caplog.records] == ["publish_outcome", "ingestion_outcome"]
        assert caplog.records[0].outcome == "deduplicated"
        assert caplog.records[1].branch == "verified"
