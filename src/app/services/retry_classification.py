"""Classificação de falhas do consumidor da fila: retentável ou permanente.

Ordem de prioridade:
    1. timeout -> retentável
    2. rede/infraestrutura -> retentável
    3. validação -> permanente
    4. autenticação/autorização -> permanente
    5. qualquer outra -> retentável
"""

from __future__ import annotations

from enum import Enum

import httpx
from google.api_core import exceptions as gexc
from pydantic import ValidationError

from app.infra.http import HttpError
from utils.errors import AuthenticationError, InfrastructureError

_TIMEOUT_TYPES: tuple[type[BaseException], ...] = (
    TimeoutError,
    httpx.TimeoutException,
    gexc.DeadlineExceeded,
)
_NETWORK_TYPES: tuple[type[BaseException], ...] = (
    ConnectionError,
    httpx.TransportError,
    gexc.ServiceUnavailable,
    gexc.InternalServerError,
    gexc.Aborted,
    gexc.ResourceExhausted,
    InfrastructureError,
)
_VALIDATION_TYPES: tuple[type[BaseException], ...] = (ValueError, ValidationError)
_AUTH_TYPES: tuple[type[BaseException], ...] = (
    PermissionError,
    AuthenticationError,
    gexc.PermissionDenied,
    gexc.Unauthenticated,
)


class RetryDecision(Enum):
    """Decisão do consumidor diante de uma falha."""

    RETRYABLE = "retryable"
    PERMANENT = "permanent"


def classify_error(exc: BaseException) -> RetryDecision:
    """Classifica uma exceção do processamento de um evento."""
    message = str(exc).lower()

    if isinstance(exc, _TIMEOUT_TYPES) or "timeout" in message or "timed out" in message:
        return RetryDecision.RETRYABLE

    if isinstance(exc, _NETWORK_TYPES):
        return RetryDecision.RETRYABLE
    if isinstance(exc, HttpError) and exc.is_retryable:
        return RetryDecision.RETRYABLE

    if isinstance(exc, _VALIDATION_TYPES) or "invalid" in message or "validation" in message:
        return RetryDecision.PERMANENT

    if (
        isinstance(exc, _AUTH_TYPES)
        or "unauthorized" in message
        or "authentication" in message
    ):
        return RetryDecision.PERMANENT

    return RetryDecision.RETRYABLE


def is_retryable(exc: BaseException) -> bool:
    """Atalho: True se a falha deve ser reentregue pela fila."""
    return classify_error(exc) is RetryDecision.RETRYABLE
