"""Protocolos HTTP usados pelo app.

Evita dependência direta da camada api.
"""

from __future__ import annotations

from typing import Any, Protocol


class InstagramHttpClientProtocol(Protocol):
    """Contrato mínimo para o cliente da Graph API do Instagram."""

    async def send_message(
        self,
        endpoint: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]: ...

    async def get_json(
        self,
        endpoint: str,
        access_token: str,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]: ...
