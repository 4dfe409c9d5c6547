"""Fila em memória: apenas para desenvolvimento e testes.

Entrega o evento ao handler (consumidor) inline, deduplicando pela
mesma chave usada no Cloud Tasks. O QueueBridge montado com este
publisher não aplica timeout de publicação: cancelar a ingestão no meio
deixaria envios em `pending`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.protocols.queue import EventPublisherProtocol, PublishOutcome, dedupe_key_for

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.models import MessagingEvent

logger = logging.getLogger(__name__)


class InMemoryEventPublisher(EventPublisherProtocol):
    """Publisher em memória com entrega inline opcional.

    Falha do handler é registrada e não afeta o resultado da publicação:
    o evento foi aceito pela fila.
    """

    def __init__(
        self,
        handler: Callable[[MessagingEvent], Awaitable[Any]] | None = None,
    ) -> None:
        self._handler = handler
        self._seen: set[str] = set()
        self.published: list[MessagingEvent] = []

    def set_handler(self, handler: Callable[[MessagingEvent], Awaitable[Any]]) -> None:
        """Define o consumidor após a construção (wiring circular)."""
        self._handler = handler

    async def publish(self, event: MessagingEvent) -> PublishOutcome:
        key = dedupe_key_for(event.mid)
        if key in self._seen:
            return PublishOutcome.DEDUPLICATED

        self._seen.add(key)
        self.published.append(event)

        if self._handler is not None:
            try:
                await self._handler(event)
            except Exception:
                logger.exception("memory_queue_handler_failed", extra={"mid": event.mid})

        return PublishOutcome.PUBLISHED
