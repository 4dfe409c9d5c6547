"""Firestore Message Store: mensagens recebidas.

Estrutura no Firestore:
    messages/{document_id_for(mid)}

O id do documento deriva do `mid` (ver `document_id_for`): `create()`
concorrente resolve para AlreadyExists e o registro existente é retornado.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import AlreadyExists

from app.domain.timestamps import normalize_timestamp
from app.infra.stores.firestore_base import FirestoreStoreBase, document_id_for
from app.protocols.models import MessageRecord, MessagingEvent
from app.protocols.stores import MessageStoreProtocol
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore_v1.base_document import DocumentSnapshot

logger = logging.getLogger(__name__)

MESSAGES_COLLECTION = "messages"


def message_from_snapshot(snapshot: DocumentSnapshot) -> MessageRecord:
    """Converte snapshot Firestore em MessageRecord."""
    data: dict[str, Any] = snapshot.to_dict() or {}
    return MessageRecord(
        mid=data.get("mid") or snapshot.id,
        sender_ig_id=data.get("sender_ig_id", ""),
        recipient_ig_id=data.get("recipient_ig_id", ""),
        received_at=data["received_at"],
        message_text=data.get("message_text"),
        attachments=data.get("attachments"),
        processed=bool(data.get("processed", False)),
        created_at=data.get("created_at"),
    )


class FirestoreMessageStore(FirestoreStoreBase, MessageStoreProtocol):
    """Store de mensagens no Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = MESSAGES_COLLECTION,
        timeout_seconds: float = 10.0,
    ) -> None:
        super().__init__(firestore_client, collection, timeout_seconds)

    async def insert_if_absent(
        self,
        event: MessagingEvent,
    ) -> tuple[MessageRecord, bool]:
        received_at = normalize_timestamp(event.timestamp)
        return await self._run(
            "insert_if_absent",
            self._insert_if_absent_sync,
            event,
            received_at,
        )

    def _insert_if_absent_sync(
        self,
        event: MessagingEvent,
        received_at: datetime,
    ) -> tuple[MessageRecord, bool]:
        ref = self._collection().document(document_id_for(event.mid))
        now = datetime.now(UTC)
        data = {
            "mid": event.mid,
            "sender_ig_id": event.sender_ig_id,
            "recipient_ig_id": event.recipient_ig_id,
            "received_at": received_at,
            "message_text": event.message_text,
            "attachments": event.attachments,
            "processed": False,
            "created_at": now,
        }

        try:
            ref.create(data, timeout=self._timeout)
        except AlreadyExists:
            snapshot = ref.get(timeout=self._timeout)
            if not snapshot.exists:
                raise FirestoreUnavailableError(
                    f"Mensagem {event.mid} em conflito mas não encontrada"
                ) from None
            logger.info("message_duplicate", extra={"mid": event.mid})
            return message_from_snapshot(snapshot), False

        record = MessageRecord(
            mid=event.mid,
            sender_ig_id=event.sender_ig_id,
            recipient_ig_id=event.recipient_ig_id,
            received_at=received_at,
            message_text=event.message_text,
            attachments=event.attachments,
            processed=False,
            created_at=now,
        )
        return record, True

    async def get(self, mid: str) -> MessageRecord | None:
        return await self._run("get", self._get_sync, mid)

    def _get_sync(self, mid: str) -> MessageRecord | None:
        ref = self._collection().document(document_id_for(mid))
        snapshot = ref.get(timeout=self._timeout)
        if not snapshot.exists:
            return None
        return message_from_snapshot(snapshot)

    async def mark_processed(self, mid: str) -> None:
        await self._run("mark_processed", self._mark_processed_sync, mid)

    def _mark_processed_sync(self, mid: str) -> None:
        self._collection().document(document_id_for(mid)).update(
            {"processed": True, "processed_at": datetime.now(UTC)},
            timeout=self._timeout,
        )
