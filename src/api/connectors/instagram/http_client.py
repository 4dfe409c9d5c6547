"""Cliente HTTP especializado para a Graph API do Instagram.

Estende HttpClient com:
- Bearer token no header Authorization
- Tratamento de erros Meta (error.type, error.code)
- Logging sem tokens nem texto de mensagens
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from api.connectors.instagram.meta_errors import InstagramApiError, parse_meta_error
from app.infra.http import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    import httpx

    from config.settings import InstagramSettings

logger: logging.Logger = logging.getLogger(__name__)


class InstagramHttpClient(HttpClient):
    """Cliente HTTP para a Graph API do Instagram.

    Tratamento específico:
    - Rate limiting (429) e 5xx: retryable
    - Erros Meta: classifica permanente vs transitório
    - Respostas sem JSON válido viram HttpError
    """

    async def send_message(
        self,
        endpoint: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Envia DM via Graph API.

        Raises:
            ValueError: Se access_token está vazio.
            HttpError: Se erro HTTP ou Meta.
        """
        headers = self._auth_headers(access_token)
        response = await self.post(endpoint, json=payload, headers=headers)
        return self._process_response(response, "POST", endpoint)

    async def get_json(
        self,
        endpoint: str,
        access_token: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """GET autenticado na Graph API (ex: perfil público)."""
        headers = self._auth_headers(access_token)
        response = await self.get(endpoint, params=params, headers=headers)
        return self._process_response(response, "GET", endpoint)

    def _auth_headers(self, access_token: str) -> dict[str, str]:
        if not access_token or not access_token.strip():
            logger.error("instagram_access_token_missing")
            raise ValueError(
                "access_token é obrigatório. "
                "Verifique se INSTAGRAM_ACCESS_TOKEN está configurado."
            )
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }

    def _process_response(
        self,
        response: httpx.Response,
        method: str,
        endpoint: str,
    ) -> dict[str, Any]:
        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            logger.error(
                "instagram_invalid_json",
                extra={"endpoint": endpoint, "status_code": response.status_code},
            )
            raise HttpError(
                "Response JSON inválido",
                status_code=response.status_code,
            ) from exc

        meta_error = parse_meta_error(data)
        if meta_error:
            self._raise_meta_error(meta_error, method, endpoint)

        if response.status_code >= 400:
            raise HttpError(
                f"Graph API HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            raise HttpError("Response JSON não é objeto", status_code=response.status_code)

        logger.debug(
            "instagram_api_success",
            extra={
                "method": method,
                "endpoint": endpoint,
                "status_code": response.status_code,
            },
        )
        return data

    def _raise_meta_error(
        self,
        meta_error: InstagramApiError,
        method: str,
        endpoint: str,
    ) -> None:
        logger.warning(
            "instagram_api_error",
            extra={
                "method": method,
                "endpoint": endpoint,
                "error_type": meta_error.error_type,
                "error_code": meta_error.error_code,
                "error_subcode": meta_error.error_subcode,
                "is_permanent": meta_error.is_permanent,
            },
        )
        raise HttpError(
            f"Meta API error: {meta_error.error_type} ({meta_error.error_code}): "
            f"{meta_error.error_message}",
            status_code=meta_error.error_code,
            is_retryable=not meta_error.is_permanent,
        )


def create_instagram_http_client(
    settings: InstagramSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> InstagramHttpClient:
    """Factory para criar cliente Instagram com config padrão."""
    # Import local para evitar dependência circular
    from config.settings import get_instagram_settings

    instagram = settings or get_instagram_settings()
    config = HttpClientConfig(timeout_seconds=instagram.request_timeout_seconds)
    return InstagramHttpClient(config=config, transport=transport)
