"""Extração e armazenamento de reels/posts compartilhados via DM.

`extract_media` é puro e tolerante: anexos malformados são ignorados.
`MediaStoreService.store` é best-effort por item: a falha de um item
não interrompe os demais.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.protocols.models import MediaAttachment, MediaItemRecord, MediaType
from config.logging import log_best_effort_failure

if TYPE_CHECKING:
    from app.protocols.models import InstagramProfile, MessagingEvent
    from app.protocols.stores import MediaStoreProtocol

logger = logging.getLogger(__name__)

# tipo do anexo -> (media_type, chave do id no payload)
_SUPPORTED_ATTACHMENTS: dict[str, tuple[MediaType, str]] = {
    "ig_reel": ("reel", "reel_video_id"),
    "ig_post": ("post", "ig_post_media_id"),
}


def extract_media(attachments: Any) -> list[MediaAttachment]:
    """Extrai reels e posts dos anexos de uma DM.

    `share`, tipos desconhecidos e anexos sem tipo são ignorados.
    """
    if not isinstance(attachments, list):
        return []

    media: list[MediaAttachment] = []
    for attachment in attachments:
        if not isinstance(attachment, dict) or not attachment.get("type"):
            continue

        attachment_type = attachment["type"]
        spec = _SUPPORTED_ATTACHMENTS.get(attachment_type)
        if spec is None:
            logger.debug("attachment_skipped", extra={"attachment_type": attachment_type})
            continue

        media_type, id_key = spec
        payload = attachment.get("payload")
        if not isinstance(payload, dict) or not payload.get(id_key) or not payload.get("url"):
            logger.warning(
                "attachment_payload_invalid",
                extra={"attachment_type": attachment_type},
            )
            continue

        media.append(
            MediaAttachment(
                media_type=media_type,
                media_id=str(payload[id_key]),
                url=str(payload["url"]),
                title=payload.get("title") or None,
            )
        )
    return media


class MediaStoreService:
    """Salva mídias na biblioteca do usuário conectado ao perfil."""

    def __init__(self, store: MediaStoreProtocol) -> None:
        self._store = store

    async def store(self, event: MessagingEvent, profile: InstagramProfile) -> int:
        """Armazena as mídias do evento.

        Returns:
            Quantidade de itens efetivamente inseridos.
        """
        owner_user_id = profile.connected_user_id
        if not owner_user_id:
            logger.debug("media_skipped_unconnected", extra={"mid": event.mid})
            return 0

        items = extract_media(event.attachments)
        if not items:
            return 0

        stored = 0
        for item in items:
            try:
                if await self._store.exists(owner_user_id, item.media_id):
                    logger.info(
                        "media_duplicate_skipped",
                        extra={"mid": event.mid, "media_id": item.media_id},
                    )
                    continue

                inserted = await self._store.insert(
                    MediaItemRecord(
                        owner_user_id=owner_user_id,
                        owner_ig_id=profile.ig_id,
                        sender_ig_id=event.sender_ig_id,
                        media_type=item.media_type,
                        media_id=item.media_id,
                        url=item.url,
                        title=item.title,
                    )
                )
            except Exception as exc:
                log_best_effort_failure(
                    logger,
                    "media_insert",
                    exc,
                    mid=event.mid,
                    media_id=item.media_id,
                )
                continue

            if inserted:
                stored += 1
            else:
                logger.info(
                    "media_insert_race_resolved",
                    extra={"mid": event.mid, "media_id": item.media_id},
                )

        logger.info(
            "media_stored",
            extra={"mid": event.mid, "found": len(items), "stored": stored},
        )
        return stored
