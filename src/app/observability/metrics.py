"""Registro de métricas via structured logging.

Métricas viram logs com `metric_type` e são agregadas fora do serviço
(log-based metrics no Cloud Logging).

Métricas suportadas:
- latency: duração por componente/operação
- delivery_attempt: cada tentativa de envio de DM
- publish_outcome: resultado da publicação de um evento na fila
- ingestion_outcome: resultado do processamento de um evento
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "queue_bridge")
        operation: Nome da operação (ex: "publish_all")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_delivery_attempt(
    kind: str,
    attempt: int,
    success: bool,
    outbound_message_id: str,
    status_code: int | None = None,
) -> None:
    """Registra uma tentativa de envio de DM."""
    logger.info(
        "metric_delivery_attempt",
        extra={
            "metric_type": "delivery_attempt",
            "kind": kind,
            "attempt": attempt,
            "success": success,
            "outbound_message_id": outbound_message_id,
            "status_code": status_code,
        },
    )


def record_publish_outcome(mid: str, outcome: str) -> None:
    """Registra resultado da publicação (published|deduplicated|failed)."""
    logger.info(
        "metric_publish_outcome",
        extra={"metric_type": "publish_outcome", "mid": mid, "outcome": outcome},
    )


def record_ingestion_outcome(mid: str, branch: str, success: bool) -> None:
    """Registra resultado do processamento de um evento."""
    logger.info(
        "metric_ingestion_outcome",
        extra={
            "metric_type": "ingestion_outcome",
            "mid": mid,
            "branch": branch,
            "success": success,
        },
    )
