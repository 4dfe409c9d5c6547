"""Protocolos da fila de ingestão (webhook -> consumidor)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.protocols.models import MessagingEvent


class PublishOutcome(Enum):
    """Resultado da publicação de um evento."""

    PUBLISHED = "published"
    DEDUPLICATED = "deduplicated"


def dedupe_key_for(mid: str) -> str:
    """Chave determinística de deduplicação de um evento."""
    return f"ig_msg_{mid}"


class EventPublisherProtocol(ABC):
    """Contrato para publicar eventos na fila at-least-once.

    Implementações devem:
        - Usar dedupe_key_for(mid) como chave de deduplicação
        - Tratar publicação repetida da mesma chave como DEDUPLICATED
        - Levantar QueuePublishError em falha (inclusive timeout)
    """

    @abstractmethod
    async def publish(self, event: MessagingEvent) -> PublishOutcome: ...
