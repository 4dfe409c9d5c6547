"""Autenticação de chamadas entre serviços."""

from app.infra.auth.oidc import CloudTasksOidcVerifier, TaskAuthResult
from app.infra.auth.service_token import (
    ServiceTokenResult,
    TrustedHeaderSessionResolver,
    check_service_token,
)

__all__ = [
    "CloudTasksOidcVerifier",
    "ServiceTokenResult",
    "TaskAuthResult",
    "TrustedHeaderSessionResolver",
    "check_service_token",
]
