"""Firestore Outbound Message Store: DMs enviadas.

Estrutura no Firestore:
    outbound_messages/{uuid}
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.infra.stores.firestore_base import FirestoreStoreBase
from app.protocols.models import OutboundMessageRecord, OutboundStatus
from app.protocols.stores import OutboundMessageStoreProtocol

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

OUTBOUND_COLLECTION = "outbound_messages"


class FirestoreOutboundMessageStore(FirestoreStoreBase, OutboundMessageStoreProtocol):
    """Store de registros de DMs no Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = OUTBOUND_COLLECTION,
        timeout_seconds: float = 10.0,
    ) -> None:
        super().__init__(firestore_client, collection, timeout_seconds)

    async def create(self, record: OutboundMessageRecord) -> None:
        await self._run("create", self._create_sync, record)

    def _create_sync(self, record: OutboundMessageRecord) -> None:
        now = datetime.now(UTC)
        self._collection().document(record.id).create(
            {
                "id": record.id,
                "recipient_ig_id": record.recipient_ig_id,
                "kind": record.kind,
                "payload": record.payload,
                "status": record.status,
                "attempts": record.attempts,
                "remote_message_id": record.remote_message_id,
                "error": record.error,
                "created_at": record.created_at or now,
                "updated_at": record.updated_at or now,
            },
            timeout=self._timeout,
        )

    async def update(
        self,
        outbound_id: str,
        *,
        status: OutboundStatus,
        attempts: int,
        remote_message_id: str | None = None,
        error: str | None = None,
    ) -> None:
        fields: dict[str, Any] = {
            "status": status,
            "attempts": attempts,
            "error": error,
            "updated_at": datetime.now(UTC),
        }
        if remote_message_id is not None:
            fields["remote_message_id"] = remote_message_id
        await self._run("update", self._update_sync, outbound_id, fields)

    def _update_sync(self, outbound_id: str, fields: dict[str, Any]) -> None:
        self._collection().document(outbound_id).update(fields, timeout=self._timeout)

    async def get(self, outbound_id: str) -> OutboundMessageRecord | None:
        return await self._run("get", self._get_sync, outbound_id)

    def _get_sync(self, outbound_id: str) -> OutboundMessageRecord | None:
        snapshot = self._collection().document(outbound_id).get(timeout=self._timeout)
        if not snapshot.exists:
            return None
        data: dict[str, Any] = snapshot.to_dict() or {}
        return OutboundMessageRecord(
            id=data.get("id") or snapshot.id,
            recipient_ig_id=data.get("recipient_ig_id", ""),
            kind=data.get("kind", "custom"),
            payload=data.get("payload") or {},
            status=data.get("status", "pending"),
            attempts=int(data.get("attempts", 0)),
            remote_message_id=data.get("remote_message_id"),
            error=data.get("error"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
