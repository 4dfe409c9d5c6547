"""Ponte entre o webhook e a fila de ingestão.

Publica todos os eventos em paralelo e aguarda cada publicação, com
timeout por evento (sem limite quando `publish_timeout_seconds` é None:
a fila em memória processa o evento inline e cada etapa já tem timeout).
Nunca levanta exceção por falha de publicação: o webhook precisa
responder 200 ao Meta de qualquer forma.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.observability import record_latency, record_publish_outcome
from app.protocols.models import PublishSummary
from app.protocols.queue import PublishOutcome
from config.logging import log_best_effort_failure

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.protocols.models import MessagingEvent
    from app.protocols.queue import EventPublisherProtocol

logger = logging.getLogger(__name__)

DEFAULT_PUBLISH_TIMEOUT_SECONDS = 5.0


class QueueBridge:
    """Publica eventos extraídos do webhook.

    Args:
        publisher: Publisher da fila
        publish_timeout_seconds: Limite de cada publicação (None: sem limite)
    """

    def __init__(
        self,
        publisher: EventPublisherProtocol,
        publish_timeout_seconds: float | None = DEFAULT_PUBLISH_TIMEOUT_SECONDS,
    ) -> None:
        self._publisher = publisher
        self._timeout = publish_timeout_seconds

    async def publish_all(self, events: Sequence[MessagingEvent]) -> PublishSummary:
        """Publica e aguarda todos os eventos."""
        summary = PublishSummary(total=len(events))
        if not events:
            return summary

        started = time.perf_counter()
        outcomes = await asyncio.gather(*(self._publish_one(event) for event in events))

        for event, outcome in zip(events, outcomes, strict=True):
            if outcome is PublishOutcome.PUBLISHED:
                summary.published += 1
            elif outcome is PublishOutcome.DEDUPLICATED:
                summary.deduplicated += 1
            else:
                summary.failed += 1
                summary.failed_mids.append(event.mid)

        record_latency("queue_bridge", "publish_all", (time.perf_counter() - started) * 1000)
        logger.info(
            "queue_bridge_summary",
            extra={
                "total": summary.total,
                "published": summary.published,
                "deduplicated": summary.deduplicated,
                "failed": summary.failed,
            },
        )
        return summary

    async def _publish_one(self, event: MessagingEvent) -> PublishOutcome | None:
        try:
            outcome = await asyncio.wait_for(self._publisher.publish(event), timeout=self._timeout)
        except TimeoutError as exc:
            log_best_effort_failure(
                logger, "queue_publish", exc, mid=event.mid, timeout_seconds=self._timeout
            )
            record_publish_outcome(event.mid, "failed")
            return None
        except Exception as exc:
            log_best_effort_failure(logger, "queue_publish", exc, mid=event.mid)
            record_publish_outcome(event.mid, "failed")
            return None

        record_publish_outcome(event.mid, outcome.value)
        return outcome
