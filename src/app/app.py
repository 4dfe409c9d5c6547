"""Entrypoint da aplicação reeva-ingest.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import create_service_container, initialize_app, validate_runtime_settings
from config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.bootstrap.instagram_factory import ServiceContainer

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


async def _seed_firestore_health_doc(firestore_client: object) -> None:
    """Escreve documento mínimo de health para check de readiness."""

    def _write_doc() -> None:
        firestore_client.collection("_health").document("check").set(  # type: ignore[attr-defined]
            {
                "updated_at": datetime.now(UTC).isoformat(),
                "service": "reeva-ingest",
            }
        )

    await asyncio.to_thread(_write_doc)


async def _close_cloud_tasks_client(container: ServiceContainer) -> None:
    client = container.cloud_tasks_client
    if client is None:
        return
    close = getattr(getattr(client, "transport", None), "close", None)
    if callable(close):
        await close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Monta o container (clientes Firestore e Cloud Tasks conforme backend)

    Shutdown:
    - Fecha o canal do Cloud Tasks
    """
    logger.info("app_starting", extra={"service": "reeva-ingest"})
    owns_container = getattr(app.state, "container", None) is None

    if owns_container:
        validate_runtime_settings()
        app.state.container = create_service_container()
        firestore_client = app.state.container.firestore_client
        if firestore_client is not None:
            try:
                await _seed_firestore_health_doc(firestore_client)
            except Exception as exc:
                logger.warning(
                    "firestore_health_seed_failed",
                    extra={"error_type": type(exc).__name__},
                )

    yield

    logger.info("app_shutting_down", extra={"service": "reeva-ingest"})
    if owns_container:
        await _close_cloud_tasks_client(app.state.container)


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        container: Container pronto (testes). Se None, o lifespan monta
            a partir das settings de ambiente.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="reeva-ingest",
        description="Ingestão de DMs do Instagram e entrega de mensagens outbound",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    fastapi_app.state.container = container

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "reeva-ingest"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting reeva-ingest in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
