"""Serviço de tokens de verificação de conta Instagram.

O token em texto claro (256 bits, hex) só existe em memória e na DM
enviada ao usuário; o store guarda o SHA-256. Consumo é único:
quem perde a corrida do compare-and-set recebe NOT_FOUND.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from app.protocols.models import IssuedToken, LinkResult, VerificationTokenRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.stores import VerificationTokenStoreProtocol

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
DEFAULT_TTL_SECONDS = 3600


def hash_token(token_plain: str) -> str:
    """SHA-256 hex do token em texto claro."""
    return hashlib.sha256(token_plain.encode("utf-8")).hexdigest()


class VerificationTokenService:
    """Emite e consome tokens de verificação.

    Args:
        store: Store de tokens
        ttl_seconds: Validade do token
        clock: Relógio injetável (UTC)
    """

    def __init__(
        self,
        store: VerificationTokenStoreProtocol,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or (lambda: datetime.now(UTC))

    async def create(self, ig_id: str, triggering_event_id: str) -> IssuedToken:
        """Emite um token vinculado ao perfil e ao evento que o originou."""
        token_plain = secrets.token_hex(TOKEN_BYTES)
        token_hash = hash_token(token_plain)
        now = self._clock()
        expires_at = now + self._ttl

        await self._store.create(
            VerificationTokenRecord(
                token_hash=token_hash,
                ig_id=ig_id,
                expires_at=expires_at,
                created_by_event_id=triggering_event_id,
                created_at=now,
            )
        )
        logger.info(
            "verification_token_created",
            extra={"ig_id": ig_id, "event_id": triggering_event_id},
        )
        return IssuedToken(token_plain=token_plain, token_hash=token_hash, expires_at=expires_at)

    async def consume(self, token_plain: str, ig_id: str) -> LinkResult:
        """Consome o token se ativo, não expirado e do mesmo ig_id."""
        if not token_plain or not ig_id:
            return LinkResult.NOT_FOUND

        token_hash = hash_token(token_plain)
        record = await self._store.get_active(token_hash, ig_id)
        if record is None:
            logger.info("verification_token_not_found", extra={"ig_id": ig_id})
            return LinkResult.NOT_FOUND

        if record.expires_at <= self._clock():
            logger.info("verification_token_expired", extra={"ig_id": ig_id})
            return LinkResult.EXPIRED

        if not await self._store.mark_consumed(token_hash):
            logger.info("verification_token_already_consumed", extra={"ig_id": ig_id})
            return LinkResult.NOT_FOUND

        logger.info("verification_token_consumed", extra={"ig_id": ig_id})
        return LinkResult.OK

    async def issued_for_event(self, ig_id: str, event_id: str) -> bool:
        """Indica se um token já foi emitido para o evento."""
        return await self._store.exists_for_event(ig_id, event_id)
