"""Settings específicas de Instagram.

Configurações do canal Instagram (Messaging API via Graph API).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes do Graph API
GRAPH_API_VERSION: str = "v24.0"
GRAPH_API_BASE_URL: str = "https://graph.instagram.com"


@dataclass(frozen=True)
class InstagramSettings:
    """Configurações do canal Instagram.

    Attributes:
        verify_token: Token para verificação de webhook (hub.verify_token)
        access_token: Token de acesso à Graph API
        scoped_id: ID da conta Instagram que envia DMs
        api_base_url: URL base da Graph API
        api_version: Versão da Graph API (ex: v24.0)
        request_timeout_seconds: Timeout por requisição HTTP
        send_max_attempts: Máximo de tentativas de envio de DM
        backoff_base_seconds: Espera base entre tentativas
        backoff_max_seconds: Teto da espera entre tentativas
        app_base_url: URL pública do app web (link de verificação)
        token_ttl_seconds: Validade do token de verificação
    """

    # Credenciais
    verify_token: str = ""
    access_token: str = ""
    scoped_id: str = ""

    # API
    api_base_url: str = GRAPH_API_BASE_URL
    api_version: str = GRAPH_API_VERSION
    request_timeout_seconds: float = 10.0

    # Envio de DMs
    send_max_attempts: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 10.0

    # Verificação de conta
    app_base_url: str = ""
    token_ttl_seconds: int = 3600

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}"

    def get_messages_endpoint(self, scoped_id: str | None = None) -> str:
        """Retorna URL para envio de DMs.

        Raises:
            ValueError: Se scoped_id não informado e não configurado.
        """
        sid = scoped_id or self.scoped_id
        if not sid:
            raise ValueError("scoped_id é obrigatório")
        return f"{self.api_endpoint}/{sid}/messages"

    def get_profile_endpoint(self, ig_id: str) -> str:
        """Retorna URL de consulta de perfil público."""
        if not ig_id:
            raise ValueError("ig_id é obrigatório")
        return f"{self.api_endpoint}/{ig_id}"

    def validate(self) -> list[str]:
        """Valida configurações mínimas de Instagram.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.verify_token:
            errors.append("INSTAGRAM_VERIFY_TOKEN não configurado")

        if not self.access_token:
            errors.append("INSTAGRAM_ACCESS_TOKEN não configurado")

        if not self.scoped_id:
            errors.append("INSTAGRAM_SCOPED_ID não configurado")

        if not self.app_base_url:
            errors.append("APP_BASE_URL não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("INSTAGRAM_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.send_max_attempts < 1:
            errors.append("INSTAGRAM_SEND_MAX_ATTEMPTS deve ser >= 1")

        if self.backoff_base_seconds < 0 or self.backoff_max_seconds < 0:
            errors.append("INSTAGRAM_BACKOFF_* deve ser >= 0")

        if self.token_ttl_seconds <= 0:
            errors.append("VERIFICATION_TOKEN_TTL_SECONDS deve ser > 0")

        return errors


def _load_instagram_from_env() -> InstagramSettings:
    """Carrega InstagramSettings de variáveis de ambiente."""
    return InstagramSettings(
        verify_token=os.getenv("INSTAGRAM_VERIFY_TOKEN", ""),
        access_token=os.getenv("INSTAGRAM_ACCESS_TOKEN", ""),
        scoped_id=os.getenv("INSTAGRAM_SCOPED_ID", ""),
        api_base_url=os.getenv("INSTAGRAM_API_BASE_URL", GRAPH_API_BASE_URL),
        api_version=os.getenv("INSTAGRAM_API_VERSION", GRAPH_API_VERSION),
        request_timeout_seconds=float(
            os.getenv("INSTAGRAM_REQUEST_TIMEOUT_SECONDS", "10")
        ),
        send_max_attempts=int(os.getenv("INSTAGRAM_SEND_MAX_ATTEMPTS", "3")),
        backoff_base_seconds=float(os.getenv("INSTAGRAM_BACKOFF_BASE_SECONDS", "1")),
        backoff_max_seconds=float(os.getenv("INSTAGRAM_BACKOFF_MAX_SECONDS", "10")),
        app_base_url=os.getenv("APP_BASE_URL", ""),
        token_ttl_seconds=int(os.getenv("VERIFICATION_TOKEN_TTL_SECONDS", "3600")),
    )


@lru_cache(maxsize=1)
def get_instagram_settings() -> InstagramSettings:
    """Retorna instância cacheada de InstagramSettings."""
    return _load_instagram_from_env()
