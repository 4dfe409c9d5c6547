"""Verificação do token OIDC enviado pelo Cloud Tasks ao consumidor.

O Cloud Tasks assina cada entrega com um ID token da service account
invocadora. O consumidor valida assinatura, audience e e-mail.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from google.auth import exceptions as auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class TaskAuthResult:
    """Resultado da verificação do token da task."""

    valid: bool
    skipped: bool = False
    error: str | None = None
    email: str | None = None


class CloudTasksOidcVerifier:
    """Valida o header Authorization de entregas do Cloud Tasks.

    Args:
        audience: Audience esperada (URL do consumidor)
        service_account_email: E-mail esperado no claim `email`
        required: Se False e sem audience, a verificação é pulada (dev)
        verify_func: Função de verificação (padrão: verify_oauth2_token)
    """

    def __init__(
        self,
        audience: str,
        service_account_email: str = "",
        *,
        required: bool = True,
        verify_func: Callable[..., dict[str, Any]] | None = None,
    ) -> None:
        self._audience = audience
        self._service_account_email = service_account_email
        self._required = required
        self._verify = verify_func or id_token.verify_oauth2_token
        self._request = google_requests.Request()

    async def verify(self, authorization: str | None) -> TaskAuthResult:
        """Valida o bearer token recebido."""
        if not self._audience:
            if self._required:
                return TaskAuthResult(valid=False, error="audience_not_configured")
            return TaskAuthResult(valid=True, skipped=True)

        if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
            return TaskAuthResult(valid=False, error="missing_bearer_token")

        token = authorization[len(BEARER_PREFIX):].strip()
        try:
            claims = await asyncio.to_thread(
                self._verify,
                token,
                self._request,
                audience=self._audience,
            )
        except ValueError:
            return TaskAuthResult(valid=False, error="invalid_token")
        except auth_exceptions.GoogleAuthError as exc:
            logger.warning(
                "oidc_verification_unavailable",
                extra={"error_type": type(exc).__name__},
            )
            return TaskAuthResult(valid=False, error="verification_unavailable")

        email = claims.get("email")
        if self._service_account_email and email != self._service_account_email:
            return TaskAuthResult(valid=False, error="unexpected_service_account", email=email)
        if self._service_account_email and claims.get("email_verified") is False:
            return TaskAuthResult(valid=False, error="email_not_verified", email=email)

        return TaskAuthResult(valid=True, email=email)
