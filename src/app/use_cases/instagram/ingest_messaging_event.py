"""Use case de ingestão de um evento de DM do Instagram.

Fluxo:
    1. upsert do perfil do remetente
    2. insert-if-absent da mensagem (por `mid`)
    3. ramo por `connected_user_id`:
       - não verificado: token + DM de verificação (uma vez por evento)
       - verificado: DM de confirmação, mídias, hand-off e `processed`

Falhas dos passos 1 e 2 sobem ao consumidor (que decide reentrega).
Envio de DM é best-effort nos dois ramos.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from app.constants.instagram_dm_texts import ACKNOWLEDGEMENT_DM_TEXT, build_verification_dm
from app.observability import record_ingestion_outcome, record_latency
from app.protocols.models import IngestionResult
from config.logging import log_best_effort_failure

if TYPE_CHECKING:
    from app.protocols.handoff import DownstreamHandoffProtocol
    from app.protocols.models import InstagramProfile, MessageRecord, MessagingEvent
    from app.protocols.stores import MessageStoreProtocol, ProfileStoreProtocol
    from app.services.media_extraction import MediaStoreService
    from app.services.outbound_delivery import OutboundDeliveryService
    from app.services.verification_tokens import VerificationTokenService

logger = logging.getLogger(__name__)


class IngestMessagingEventUseCase:
    """Orquestra o processamento de um evento vindo da fila."""

    def __init__(
        self,
        *,
        profiles: ProfileStoreProtocol,
        messages: MessageStoreProtocol,
        tokens: VerificationTokenService,
        delivery: OutboundDeliveryService,
        media: MediaStoreService,
        handoff: DownstreamHandoffProtocol,
        app_base_url: str,
    ) -> None:
        self._profiles = profiles
        self._messages = messages
        self._tokens = tokens
        self._delivery = delivery
        self._media = media
        self._handoff = handoff
        self._app_base_url = app_base_url

    async def execute(self, event: MessagingEvent) -> IngestionResult:
        """Processa o evento.

        Raises:
            InfrastructureError: Falha de persistência (retentável).
            InvalidTimestampError: Timestamp inválido (permanente).
        """
        started = time.perf_counter()
        logger.info(
            "ingestion_started",
            extra={"mid": event.mid, "ig_id": event.sender_ig_id},
        )

        profile = await self._profiles.upsert(event.sender_ig_id)
        message, created = await self._messages.insert_if_absent(event)

        if message.processed:
            logger.info("ingestion_already_processed", extra={"mid": event.mid})
            result = IngestionResult(True, "Message already processed", "duplicate")
        elif not profile.is_connected:
            result = await self._handle_unverified(event, created)
        else:
            result = await self._handle_verified(event, message, profile)

        record_ingestion_outcome(event.mid, result.branch, result.success)
        record_latency("ingestion", result.branch, (time.perf_counter() - started) * 1000)
        return result

    async def _handle_unverified(
        self,
        event: MessagingEvent,
        created: bool,
    ) -> IngestionResult:
        ig_id = event.sender_ig_id
        if not created and await self._tokens.issued_for_event(ig_id, event.mid):
            logger.info("verification_already_issued", extra={"mid": event.mid, "ig_id": ig_id})
            return IngestionResult(True, "Verification already sent for this message", "duplicate")

        issued = await self._tokens.create(ig_id, event.mid)
        text = build_verification_dm(self._app_base_url, issued.token_plain, ig_id)
        try:
            await self._delivery.send_with_retry(ig_id, text, "verification")
        except Exception as exc:
            log_best_effort_failure(logger, "verification_dm", exc, ig_id=ig_id, mid=event.mid)

        return IngestionResult(True, "Verification DM sent to unconnected user", "unverified")

    async def _handle_verified(
        self,
        event: MessagingEvent,
        message: MessageRecord,
        profile: InstagramProfile,
    ) -> IngestionResult:
        ig_id = event.sender_ig_id
        try:
            await self._delivery.send_with_retry(ig_id, ACKNOWLEDGEMENT_DM_TEXT, "acknowledgement")
        except Exception as exc:
            log_best_effort_failure(
                logger, "acknowledgement_dm", exc, ig_id=ig_id, mid=event.mid
            )

        await self._media.store(event, profile)

        handoff = await self._handoff.submit(message, profile)
        if handoff.ok:
            await self._messages.mark_processed(event.mid)
            logger.info("message_processed", extra={"mid": event.mid})
        else:
            logger.warning(
                "handoff_rejected",
                extra={"mid": event.mid, "detail": handoff.detail},
            )

        return IngestionResult(True, "Message processed for connected user", "verified")
