"""Router agregado do canal Instagram."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.instagram.account_link import router as account_link_router
from api.routes.instagram.ingestion import router as ingestion_router
from api.routes.instagram.internal import router as internal_router
from api.routes.instagram.profile import router as profile_router
from api.routes.instagram.webhook import router as webhook_router


def create_instagram_router() -> APIRouter:
    """Registra webhook, consumidor da fila, vínculo, perfil e rotas internas."""
    router = APIRouter()
    router.include_router(webhook_router, prefix="/webhook/instagram", tags=["instagram"])
    router.include_router(
        ingestion_router,
        prefix="/queues/instagram-ingestion",
        tags=["instagram", "queue"],
    )
    router.include_router(account_link_router, prefix="/auth/verify-instagram", tags=["auth"])
    router.include_router(profile_router, prefix="/instagram/profile", tags=["instagram"])
    router.include_router(internal_router, prefix="/internal", tags=["internal"])
    return router
