"""Configuração centralizada de logging.

Um único StreamHandler JSON no root logger, com filtros de contexto
(correlation_id, service) e de campos sensíveis.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "reeva_ingest"

# Bibliotecas ruidosas em INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "google.auth", "urllib3")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Chamada uma vez no lifespan da aplicação.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço nos logs.
        correlation_id_getter: Função que retorna o correlation_id corrente.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(SensitiveFieldFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    if level_upper != "DEBUG":
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado."""
    return logging.getLogger(name)


def log_best_effort_failure(
    logger: logging.Logger,
    step: str,
    error: BaseException,
    **context: object,
) -> None:
    """Registra falha de um passo best-effort que não interrompe o fluxo.

    Usado para envio de DM, publicação na fila, consulta de perfil e
    inserção de mídia: a falha é observável mas o chamador segue adiante.

    Args:
        logger: Logger do módulo chamador.
        step: Nome do passo (ex: "verification_dm").
        error: Exceção capturada.
        **context: Identificadores sem PII (ig_id, mid, ...).
    """
    extra: dict[str, object] = {
        "best_effort": True,
        "step": step,
        "error_type": type(error).__name__,
        "error": str(error)[:500],
    }
    extra.update(context)
    logger.warning("best_effort_step_failed", extra=extra)
