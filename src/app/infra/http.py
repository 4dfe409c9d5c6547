"""Cliente HTTP base para conectores da camada API.

Uma requisição por chamada: retries e backoff pertencem a quem chama
(motor de entrega de DMs), que registra cada tentativa.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({408, 429})


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP simples para chamadas externas.

    Args:
        config: Configuração HTTP
        transport: Transport httpx opcional (ex: MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=self._config.verify_ssl,
            timeout=self._config.timeout_seconds,
            transport=self._transport,
        )

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with self._client() as client:
                response = await client.post(url, json=json, headers=merged_headers)
        except httpx.TimeoutException as exc:
            raise HttpError("http_timeout", is_retryable=True) from exc
        except httpx.TransportError as exc:
            raise HttpError("http_connection_error", is_retryable=True) from exc
        return _check_retryable_status(response)

    async def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with self._client() as client:
                response = await client.get(url, params=params, headers=merged_headers)
        except httpx.TimeoutException as exc:
            raise HttpError("http_timeout", is_retryable=True) from exc
        except httpx.TransportError as exc:
            raise HttpError("http_connection_error", is_retryable=True) from exc
        return _check_retryable_status(response)


def _check_retryable_status(response: httpx.Response) -> httpx.Response:
    status = response.status_code
    if status in RETRYABLE_STATUS_CODES or status >= 500:
        logger.info("http_retryable_status", extra={"status_code": status})
        raise HttpError(
            "http_retryable_status",
            status_code=status,
            is_retryable=True,
        )
    return response
