"""Rotas internas (serviço a serviço), protegidas por `x-service-token`.

Endpoints:
- POST /internal/send-dm: DM genérica pelo motor de entrega
- POST /internal/send-verification-dm: DM de verificação com token já emitido
- POST /internal/verification-tokens: emite token (retorna só o hash)
- POST /internal/ingest-event: publica um evento já extraído na fila
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.connectors.instagram.webhook import InvalidJsonError, parse_webhook_body
from api.routes.dependencies import get_container
from api.routes.instagram.bodies import (
    GenerateVerificationBody,
    InvalidBodyError,
    SendDmBody,
    SendVerificationDmBody,
    read_body,
)
from app.constants.instagram_dm_texts import build_verification_dm
from app.infra.auth.service_token import (
    SERVICE_TOKEN_HEADER,
    ServiceTokenResult,
    check_service_token,
)
from app.protocols.models import OUTBOUND_KINDS, MessagingEvent
from utils.errors import InvalidEventError

if TYPE_CHECKING:
    from app.bootstrap.instagram_factory import ServiceContainer
    from app.protocols.models import DeliveryResult

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _authorize(request: Request, container: ServiceContainer) -> JSONResponse | None:
    """Retorna a resposta de erro quando o token de serviço não confere."""
    result = check_service_token(
        request.headers.get(SERVICE_TOKEN_HEADER),
        container.base_settings.internal_service_token,
    )
    if result is ServiceTokenResult.NOT_CONFIGURED:
        logger.error("service_token_not_configured", extra={"path": request.url.path})
        return _error("Service token not configured", status.HTTP_500_INTERNAL_SERVER_ERROR)
    if result is ServiceTokenResult.INVALID:
        logger.warning(
            "service_token_invalid",
            extra={
                "path": request.url.path,
                "has_token": bool(request.headers.get(SERVICE_TOKEN_HEADER)),
            },
        )
        return _error("Unauthorized", status.HTTP_401_UNAUTHORIZED)
    return None


def _delivery_payload(result: DeliveryResult) -> dict[str, Any]:
    return {
        "success": True,
        "remote_message_id": result.remote_message_id,
        "outbound_message_id": result.outbound_message_id,
    }


@router.post("/send-dm")
async def send_dm(request: Request) -> JSONResponse:
    """Envia DM de texto com retries e registro em outbound_messages."""
    container = get_container(request)
    if (denied := _authorize(request, container)) is not None:
        return denied

    try:
        body = await read_body(request, SendDmBody)
    except InvalidBodyError:
        body = SendDmBody()
    if not body.ig_id or not body.message_text:
        return _error(
            "Missing required fields: ig_id, message_text",
            status.HTTP_400_BAD_REQUEST,
        )
    if body.kind not in OUTBOUND_KINDS:
        return _error(f"Invalid kind: {body.kind}", status.HTTP_400_BAD_REQUEST)

    try:
        result = await container.delivery.send_with_retry(
            body.ig_id,
            body.message_text,
            body.kind,  # type: ignore[arg-type]
        )
    except Exception as exc:
        logger.error(
            "internal_send_dm_failed",
            extra={"ig_id": body.ig_id, "kind": body.kind, "error_type": type(exc).__name__},
        )
        return _error("Failed to send DM", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(_delivery_payload(result))


@router.post("/send-verification-dm")
async def send_verification_dm(request: Request) -> JSONResponse:
    """Envia a DM de verificação para um token emitido externamente."""
    container = get_container(request)
    if (denied := _authorize(request, container)) is not None:
        return denied

    try:
        body = await read_body(request, SendVerificationDmBody)
    except InvalidBodyError:
        body = SendVerificationDmBody()
    if not body.ig_id or not body.token_plain:
        return _error(
            "Missing required fields: ig_id, token_plain",
            status.HTTP_400_BAD_REQUEST,
        )

    text = build_verification_dm(
        container.instagram_settings.app_base_url,
        body.token_plain,
        body.ig_id,
    )
    try:
        result = await container.delivery.send_with_retry(body.ig_id, text, "verification")
    except Exception as exc:
        logger.error(
            "internal_send_verification_dm_failed",
            extra={"ig_id": body.ig_id, "error_type": type(exc).__name__},
        )
        return _error("Failed to send verification DM", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(_delivery_payload(result))


@router.post("/verification-tokens")
async def generate_verification_token(request: Request) -> JSONResponse:
    """Emite token de verificação; o texto plano nunca sai do serviço."""
    container = get_container(request)
    if (denied := _authorize(request, container)) is not None:
        return denied

    try:
        body = await read_body(request, GenerateVerificationBody)
    except InvalidBodyError:
        body = GenerateVerificationBody()
    if not body.ig_id or not body.event_id:
        return _error("Missing required fields: ig_id, event_id", status.HTTP_400_BAD_REQUEST)

    try:
        issued = await container.token_service.create(body.ig_id, body.event_id)
    except Exception as exc:
        logger.error(
            "internal_generate_token_failed",
            extra={"ig_id": body.ig_id, "error_type": type(exc).__name__},
        )
        return _error(
            "Failed to generate verification token",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        {
            "token_hash": issued.token_hash,
            "expires_at": issued.expires_at.isoformat(),
            "ig_id": body.ig_id,
        }
    )


@router.post("/ingest-event")
async def ingest_event(request: Request) -> JSONResponse:
    """Publica um evento já extraído na fila de ingestão.

    Se a publicação falhar, o evento é processado inline (aguardado).
    """
    container = get_container(request)
    if (denied := _authorize(request, container)) is not None:
        return denied

    try:
        event = MessagingEvent.from_dict(parse_webhook_body(await request.body()))
    except (InvalidJsonError, InvalidEventError):
        logger.warning("internal_ingest_invalid_payload")
        return _error(
            "Invalid event payload: missing required fields",
            status.HTTP_400_BAD_REQUEST,
        )

    summary = await container.queue_bridge.publish_all([event])
    if not summary.failed:
        logger.info("internal_event_enqueued", extra={"mid": event.mid})
        return JSONResponse({"success": True, "message": "Event enqueued for processing"})

    logger.warning("internal_event_enqueue_failed_fallback", extra={"mid": event.mid})
    try:
        await container.ingest_use_case.execute(event)
    except Exception as exc:
        logger.error(
            "internal_fallback_processing_failed",
            extra={"mid": event.mid, "error_type": type(exc).__name__},
        )
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse({"success": True, "message": "Event accepted (fallback mode)"})
