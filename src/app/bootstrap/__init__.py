"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
monta o container de serviços a partir das settings de ambiente.

Uso:
    from app.bootstrap import initialize_app, create_service_container

    initialize_app()
    container = create_service_container()
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.clients import create_cloud_tasks_client, create_firestore_client
from app.bootstrap.instagram_factory import ServiceContainer, build_container
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_cloud_tasks_settings,
    get_firestore_settings,
    get_instagram_settings,
    get_store_settings,
)

# Nome do serviço para logs e métricas
SERVICE_NAME = "reeva_ingest"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "SERVICE_NAME",
    "ServiceContainer",
    "build_container",
    "create_service_container",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]


def initialize_app() -> None:
    """Configura logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Executa o `validate()` de todas as settings, prefixando a origem."""
    base = get_base_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"stores: {error}" for error in get_store_settings().validate(base))
    errors.extend(f"instagram: {error}" for error in get_instagram_settings().validate())

    if get_store_settings().backend == "firestore":
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    cloud_tasks_errors = get_cloud_tasks_settings().validate(
        base.gcp_project,
        base.is_development,
    )
    errors.extend(f"cloud_tasks: {error}" for error in cloud_tasks_errors)
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: Configuração inválida em ambiente estrito.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


def create_service_container() -> ServiceContainer:
    """Monta o container a partir das settings de ambiente.

    Clientes GCP só são criados quando o backend correspondente está ativo.
    Deve rodar com o event loop ativo (cliente assíncrono do Cloud Tasks).
    """
    base = get_base_settings()
    store_settings = get_store_settings()
    firestore_settings = get_firestore_settings()
    cloud_tasks_settings = get_cloud_tasks_settings()

    firestore_client = None
    if store_settings.backend == "firestore":
        firestore_client = create_firestore_client(
            firestore_settings.project_id or base.gcp_project,
            firestore_settings.database,
        )

    cloud_tasks_client = None
    if cloud_tasks_settings.backend == "cloud_tasks":
        cloud_tasks_client = create_cloud_tasks_client()

    return build_container(
        base=base,
        instagram=get_instagram_settings(),
        cloud_tasks=cloud_tasks_settings,
        store_settings=store_settings,
        firestore_settings=firestore_settings,
        firestore_client=firestore_client,
        cloud_tasks_client=cloud_tasks_client,
    )
