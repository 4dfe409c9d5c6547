"""Token compartilhado das rotas internas e resolução de sessão.

Rotas internas exigem `x-service-token` igual a INTERNAL_SERVICE_TOKEN.
O app web (upstream confiável) autentica o usuário e repassa o id em
`x-user-id` junto com o token de serviço.
"""

from __future__ import annotations

import hmac
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request

SERVICE_TOKEN_HEADER = "x-service-token"
USER_ID_HEADER = "x-user-id"


class ServiceTokenResult(Enum):
    """Resultado da checagem do token de serviço."""

    OK = "ok"
    NOT_CONFIGURED = "not_configured"
    INVALID = "invalid"


def check_service_token(provided: str | None, expected: str) -> ServiceTokenResult:
    """Compara o token recebido com o configurado (tempo constante)."""
    if not expected:
        return ServiceTokenResult.NOT_CONFIGURED
    if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
        return ServiceTokenResult.INVALID
    return ServiceTokenResult.OK


class TrustedHeaderSessionResolver:
    """Resolve o usuário a partir de headers do app web confiável."""

    def __init__(self, service_token: str) -> None:
        self._service_token = service_token

    async def resolve(self, request: Request) -> str | None:
        token_check = check_service_token(
            request.headers.get(SERVICE_TOKEN_HEADER),
            self._service_token,
        )
        if token_check is not ServiceTokenResult.OK:
            return None
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
        return user_id or None
