"""Endpoints de webhook do Instagram.

Endpoints:
- GET /webhook/instagram: verificação de webhook (Meta challenge)
- POST /webhook/instagram: recebimento de eventos de DM

Fluxo POST:
1. Parse do corpo e extração dos eventos de mensagem
2. Publicação de cada evento na fila de ingestão (aguardada, com timeout)
3. 200 OK sempre, para a Meta não desativar a assinatura
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status

from api.connectors.instagram.webhook import (
    InvalidJsonError,
    WebhookChallengeError,
    parse_webhook_body,
    verify_webhook_challenge,
)
from api.normalizers.instagram import extract_messaging_events
from api.routes.dependencies import get_container
from app.observability import (
    correlation_id_from_headers,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _ok() -> Response:
    return Response(content="OK", media_type="text/plain", status_code=status.HTTP_200_OK)


@router.get("")
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook: responde ao challenge da Meta.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder ao configurado
    - hub.challenge: valor a retornar

    Returns:
        Texto do challenge ou erro 403.
    """
    settings = get_container(request).instagram_settings
    hub_mode = request.query_params.get("hub.mode")

    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=request.query_params.get("hub.verify_token"),
            hub_challenge=request.query_params.get("hub.challenge"),
            expected_token=settings.verify_token,
        )
    except WebhookChallengeError as exc:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "instagram", "error": str(exc)},
        )
        return Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    logger.info("webhook_verified", extra={"channel": "instagram", "hub_mode": hub_mode})
    # Meta espera o challenge como texto puro
    return Response(content=challenge, media_type="text/plain", status_code=status.HTTP_200_OK)


@router.post("")
async def receive_webhook(request: Request) -> Response:
    """Recebimento de eventos de DM do Instagram.

    Responde 200 mesmo para corpo inválido ou falha de publicação:
    eventos perdidos aqui são registrados em log, nunca devolvidos à Meta.
    """
    token = set_correlation_id(correlation_id_from_headers(request.headers))

    try:
        container = get_container(request)
        raw_body = await request.body()

        try:
            payload = parse_webhook_body(raw_body)
        except InvalidJsonError as exc:
            logger.warning(
                "webhook_invalid_body",
                extra={"channel": "instagram", "error": str(exc), "body_bytes": len(raw_body)},
            )
            return _ok()

        events = extract_messaging_events(payload)
        logger.info(
            "webhook_received",
            extra={
                "channel": "instagram",
                "correlation_id": get_correlation_id(),
                "event_count": len(events),
            },
        )
        if not events:
            return _ok()

        summary = await container.queue_bridge.publish_all(events)
        log_method = logger.warning if summary.failed else logger.info
        log_method(
            "webhook_events_published",
            extra={
                "channel": "instagram",
                "total": summary.total,
                "published": summary.published,
                "deduplicated": summary.deduplicated,
                "failed": summary.failed,
                "failed_mids": summary.failed_mids,
            },
        )
        return _ok()

    except Exception:
        logger.exception("webhook_processing_failed", extra={"channel": "instagram"})
        return _ok()

    finally:
        reset_correlation_id(token)
