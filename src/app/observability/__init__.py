"""Observabilidade: correlation_id e métricas via logs estruturados."""

from app.observability.correlation import (
    correlation_id_from_headers,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_delivery_attempt,
    record_ingestion_outcome,
    record_latency,
    record_publish_outcome,
)

__all__ = [
    "correlation_id_from_headers",
    "generate_correlation_id",
    "get_correlation_id",
    "record_delivery_attempt",
    "record_ingestion_outcome",
    "record_latency",
    "record_publish_outcome",
    "reset_correlation_id",
    "set_correlation_id",
]
