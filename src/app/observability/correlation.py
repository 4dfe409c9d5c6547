"""Gerenciamento de correlation_id para rastreamento de requisições.

ContextVar é seguro entre tasks asyncio. No consumidor da fila o
correlation_id vem do nome da task do Cloud Tasks, ligando o log do
webhook ao log do processamento.

Uso:
    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

CORRELATION_HEADER = "x-correlation-id"
CLOUD_TASKS_TASK_NAME_HEADER = "x-cloudtasks-taskname"


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (ou string vazia)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def correlation_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """Extrai correlation_id dos headers (explícito ou nome da task)."""
    return headers.get(CORRELATION_HEADER) or headers.get(CLOUD_TASKS_TASK_NAME_HEADER)
