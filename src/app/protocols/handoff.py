"""Protocolo do processamento downstream de mensagens verificadas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.protocols.models import HandoffResult, InstagramProfile, MessageRecord


class DownstreamHandoffProtocol(Protocol):
    """Recebe mensagens de usuários conectados para processamento posterior.

    `ok=True` autoriza marcar a mensagem como processada.
    """

    async def submit(
        self,
        message: MessageRecord,
        profile: InstagramProfile,
    ) -> HandoffResult: ...
