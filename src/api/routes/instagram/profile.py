"""Consulta de perfil público para a página de verificação.

Endpoint:
- GET /instagram/profile?ig_id=<id>

Dados de exibição são opcionais: qualquer falha da Graph API devolve
um perfil vazio com `success: true`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from api.routes.dependencies import get_container
from config.logging import log_best_effort_failure

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile_body(
    ig_id: str,
    username: str | None = None,
    name: str | None = None,
    picture_url: str | None = None,
) -> dict[str, Any]:
    return {
        "success": True,
        "profile": {
            "id": ig_id,
            "username": username,
            "name": name,
            "profile_picture_url": picture_url,
        },
    }


@router.get("")
async def get_instagram_profile(request: Request) -> JSONResponse:
    """Retorna username, nome e foto do perfil (best-effort)."""
    ig_id = (request.query_params.get("ig_id") or "").strip()
    if not ig_id:
        return JSONResponse(
            {"error": "Missing ig_id parameter"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    container = get_container(request)
    if not container.instagram_settings.access_token:
        logger.error("instagram_api_not_configured")
        return JSONResponse(
            {"error": "Instagram API not configured"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    try:
        metadata = await container.profile_lookup.fetch_profile(ig_id)
    except Exception as exc:
        log_best_effort_failure(logger, "profile_fetch", exc, ig_id=ig_id)
        return JSONResponse(_profile_body(ig_id))

    logger.info(
        "instagram_profile_fetched",
        extra={
            "ig_id": ig_id,
            "has_username": bool(metadata.username),
            "has_profile_pic": bool(metadata.profile_pic_url),
        },
    )
    return JSONResponse(
        _profile_body(ig_id, metadata.username, metadata.display_name, metadata.profile_pic_url)
    )
