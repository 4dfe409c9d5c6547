"""Confirmação de vínculo da conta Instagram (link da DM de verificação).

Endpoint:
- POST /auth/verify-instagram  {"token", "ig_id"}

O usuário vem do SessionUserResolver; o token só é consumido se o
perfil não pertencer a outro usuário.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPICallError

from api.routes.dependencies import get_container
from api.routes.instagram.bodies import InvalidBodyError, VerifyInstagramBody, read_body
from app.protocols.models import LinkResult
from utils.errors import InfrastructureError, ProfileAlreadyLinkedError

logger = logging.getLogger(__name__)

router = APIRouter()

_LINK_ERRORS = {
    LinkResult.NOT_FOUND: "Invalid or expired verification token",
    LinkResult.EXPIRED: "Verification token has expired",
}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("")
async def verify_instagram(request: Request) -> JSONResponse:
    """Consome o token e grava `connected_user_id` no perfil."""
    container = get_container(request)

    user_id = await container.session_resolver.resolve(request)
    if not user_id:
        logger.warning("account_link_unauthenticated")
        return _error(
            "You must be logged in to verify your Instagram account",
            status.HTTP_401_UNAUTHORIZED,
        )

    try:
        body = await read_body(request, VerifyInstagramBody)
    except InvalidBodyError:
        body = VerifyInstagramBody()
    if not body.token or not body.ig_id:
        return _error("Missing required fields: token, ig_id", status.HTTP_400_BAD_REQUEST)

    try:
        result = await container.account_link.link(user_id, body.token, body.ig_id)
    except ProfileAlreadyLinkedError as exc:
        return _error(str(exc), status.HTTP_400_BAD_REQUEST)
    except (InfrastructureError, GoogleAPICallError) as exc:
        logger.error(
            "account_link_failed",
            extra={"ig_id": body.ig_id, "error_type": type(exc).__name__},
        )
        return _error("Failed to link Instagram account", status.HTTP_500_INTERNAL_SERVER_ERROR)

    if result is not LinkResult.OK:
        logger.warning(
            "account_link_rejected",
            extra={"ig_id": body.ig_id, "result": result.value},
        )
        return _error(_LINK_ERRORS[result], status.HTTP_400_BAD_REQUEST)

    return JSONResponse({"success": True, "message": "Instagram account linked successfully"})
