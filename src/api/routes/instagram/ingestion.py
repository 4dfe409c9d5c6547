"""Consumidor da fila de ingestão (entregas HTTP do Cloud Tasks).

Códigos de resposta (o Cloud Tasks reentrega qualquer não-2xx):
- 401: token OIDC ausente ou inválido
- 400: payload sem campos obrigatórios ou falha permanente
- 500: falha retentável
- 200: processado, ou descartado após esgotar as tentativas
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.connectors.instagram.webhook import InvalidJsonError, parse_webhook_body
from api.routes.dependencies import get_container
from app.observability import (
    correlation_id_from_headers,
    reset_correlation_id,
    set_correlation_id,
)
from app.protocols.models import MessagingEvent
from app.services import RetryDecision, classify_error
from utils.errors import InvalidEventError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

router = APIRouter()

RETRY_COUNT_HEADER = "x-cloudtasks-taskretrycount"
INVALID_PAYLOAD_ERROR = "Invalid event payload: missing required fields"


def delivery_attempt(headers: Mapping[str, str]) -> int:
    """Número da entrega atual (1 = primeira), a partir do retry count."""
    raw = headers.get(RETRY_COUNT_HEADER, "0")
    try:
        retry_count = int(raw)
    except ValueError:
        retry_count = 0
    return max(retry_count, 0) + 1


@router.post("")
async def consume_ingestion_event(request: Request) -> JSONResponse:
    """Processa um evento entregue pela fila."""
    token = set_correlation_id(correlation_id_from_headers(request.headers))

    try:
        container = get_container(request)

        auth = await container.oidc_verifier.verify(request.headers.get("authorization"))
        if not auth.valid:
            logger.warning("ingestion_unauthorized", extra={"error": auth.error})
            return JSONResponse(
                {"error": "Unauthorized"},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        attempt = delivery_attempt(request.headers)
        max_attempts = container.cloud_tasks_settings.max_delivery_attempts
        if attempt > max_attempts:
            logger.error(
                "ingestion_delivery_exhausted",
                extra={"attempt": attempt, "max_attempts": max_attempts, "dropped": True},
            )
            return JSONResponse({"success": False, "status": "dropped"})

        try:
            event = MessagingEvent.from_dict(parse_webhook_body(await request.body()))
        except (InvalidJsonError, InvalidEventError) as exc:
            logger.warning("ingestion_invalid_payload", extra={"error": str(exc)})
            return JSONResponse(
                {"error": INVALID_PAYLOAD_ERROR},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = await container.ingest_use_case.execute(event)
        except Exception as exc:
            return _failure_response(exc, event.mid, attempt, max_attempts)

        return JSONResponse(
            {"success": result.success, "message": result.message, "branch": result.branch}
        )

    finally:
        reset_correlation_id(token)


def _failure_response(
    exc: Exception,
    mid: str,
    attempt: int,
    max_attempts: int,
) -> JSONResponse:
    decision = classify_error(exc)
    extra = {
        "mid": mid,
        "attempt": attempt,
        "max_attempts": max_attempts,
        "decision": decision.value,
        "error_type": type(exc).__name__,
    }

    if decision is RetryDecision.PERMANENT:
        logger.error("ingestion_failed_permanent", extra=extra, exc_info=exc)
        return JSONResponse(
            {"error": "Permanent failure", "retryable": False},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if attempt >= max_attempts:
        logger.error(
            "ingestion_delivery_exhausted",
            extra={**extra, "dropped": False},
            exc_info=exc,
        )
    else:
        logger.warning("ingestion_failed_retryable", extra=extra, exc_info=exc)
    return JSONResponse(
        {"error": "Retryable failure", "retryable": True},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
