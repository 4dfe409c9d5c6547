"""Motor de entrega de DMs com tentativas limitadas e rastreadas.

Fluxo:
    1. cria registro `pending` (attempts=0)
    2. até N tentativas; após cada falha atualiza o registro
       (`pending` enquanto restam tentativas, `failed` na última)
       e espera min(base * 2**(tentativa-1), teto)
    3. sucesso: `sent` + id remoto; esgotamento: levanta o último erro
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import TYPE_CHECKING

from app.observability import record_delivery_attempt
from app.protocols.models import DeliveryResult, OutboundKind, OutboundMessageRecord

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.outbound_sender import DirectMessageSenderProtocol
    from app.protocols.stores import OutboundMessageStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE_SECONDS = 1.0
DEFAULT_BACKOFF_MAX_SECONDS = 10.0
MAX_ERROR_LENGTH = 1000


def backoff_delay(attempt: int, base: float, max_seconds: float) -> float:
    """Espera após a tentativa `attempt` (1-based)."""
    return min(base * (2 ** (attempt - 1)), max_seconds)


class OutboundDeliveryService:
    """Envia DMs registrando cada tentativa em outbound_messages.

    Args:
        sender: Adapter da plataforma (uma tentativa por chamada)
        store: Store de registros outbound
        max_attempts: Máximo de tentativas
        backoff_base_seconds: Espera base
        backoff_max_seconds: Teto da espera
        sleep: Função de espera injetável (testes)
    """

    def __init__(
        self,
        sender: DirectMessageSenderProtocol,
        store: OutboundMessageStoreProtocol,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS,
        backoff_max_seconds: float = DEFAULT_BACKOFF_MAX_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts deve ser >= 1")
        self._sender = sender
        self._store = store
        self._max_attempts = max_attempts
        self._backoff_base = backoff_base_seconds
        self._backoff_max = backoff_max_seconds
        self._sleep = sleep

    async def send_with_retry(
        self,
        ig_id: str,
        text: str,
        kind: OutboundKind,
    ) -> DeliveryResult:
        """Envia a DM com retries.

        Raises:
            Exception: O erro da última tentativa, após esgotar.
        """
        outbound_id = str(uuid.uuid4())
        await self._store.create(
            OutboundMessageRecord(
                id=outbound_id,
                recipient_ig_id=ig_id,
                kind=kind,
                payload={"text": text},
            )
        )

        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                remote_id = await self._sender.send_text(ig_id, text)
            except Exception as exc:
                last_error = exc
                await self._record_failure(outbound_id, kind, attempt, exc)
                if attempt < self._max_attempts:
                    await self._sleep(
                        backoff_delay(attempt, self._backoff_base, self._backoff_max)
                    )
                continue

            await self._store.update(
                outbound_id,
                status="sent",
                attempts=attempt,
                remote_message_id=remote_id,
            )
            record_delivery_attempt(kind, attempt, True, outbound_id)
            logger.info(
                "dm_sent",
                extra={
                    "ig_id": ig_id,
                    "kind": kind,
                    "attempt": attempt,
                    "outbound_message_id": outbound_id,
                },
            )
            return DeliveryResult(remote_message_id=remote_id, outbound_message_id=outbound_id)

        logger.error(
            "dm_delivery_exhausted",
            extra={
                "ig_id": ig_id,
                "kind": kind,
                "attempts": self._max_attempts,
                "outbound_message_id": outbound_id,
            },
        )
        if last_error is None:
            raise RuntimeError("dm_delivery_exhausted")
        raise last_error

    async def _record_failure(
        self,
        outbound_id: str,
        kind: OutboundKind,
        attempt: int,
        exc: Exception,
    ) -> None:
        exhausted = attempt >= self._max_attempts
        await self._store.update(
            outbound_id,
            status="failed" if exhausted else "pending",
            attempts=attempt,
            error=str(exc)[:MAX_ERROR_LENGTH] or type(exc).__name__,
        )
        record_delivery_attempt(
            kind,
            attempt,
            False,
            outbound_id,
            status_code=getattr(exc, "status_code", None),
        )
        logger.warning(
            "dm_attempt_failed",
            extra={
                "kind": kind,
                "attempt": attempt,
                "exhausted": exhausted,
                "error_type": type(exc).__name__,
                "outbound_message_id": outbound_id,
            },
        )
