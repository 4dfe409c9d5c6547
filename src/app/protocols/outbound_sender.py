"""Protocolos de envio outbound e consulta de perfil na plataforma."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import ProfileMetadata


class DirectMessageSenderProtocol(Protocol):
    """Contrato mínimo para enviar uma DM de texto (uma tentativa)."""

    async def send_text(self, recipient_ig_id: str, text: str) -> str | None:
        """Retorna o id remoto da mensagem, quando informado."""
        ...


class ProfileLookupProtocol(Protocol):
    """Contrato para consultar metadados públicos de um perfil."""

    async def fetch_profile(self, ig_id: str) -> ProfileMetadata: ...
