"""Firestore Media Store: reels e posts salvos por usuário.

Estrutura no Firestore:
    media_items/{owner_user_id}_{media_id}

O id composto é o backstop de unicidade: a checagem por leitura evita
escritas desnecessárias, `create()` resolve a corrida.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from google.api_core.exceptions import AlreadyExists

from app.infra.stores.firestore_base import FirestoreStoreBase
from app.protocols.models import MediaItemRecord
from app.protocols.stores import MediaStoreProtocol

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

MEDIA_COLLECTION = "media_items"


def media_document_id(owner_user_id: str, media_id: str) -> str:
    """Id do documento para o par (usuário, mídia). '/' não é permitido."""
    return f"{owner_user_id}_{media_id}".replace("/", "_")


class FirestoreMediaStore(FirestoreStoreBase, MediaStoreProtocol):
    """Store de mídias salvas no Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = MEDIA_COLLECTION,
        timeout_seconds: float = 10.0,
    ) -> None:
        super().__init__(firestore_client, collection, timeout_seconds)

    async def exists(self, owner_user_id: str, media_id: str) -> bool:
        return await self._run("exists", self._exists_sync, owner_user_id, media_id)

    def _exists_sync(self, owner_user_id: str, media_id: str) -> bool:
        doc_id = media_document_id(owner_user_id, media_id)
        return bool(self._collection().document(doc_id).get(timeout=self._timeout).exists)

    async def insert(self, record: MediaItemRecord) -> bool:
        return await self._run("insert", self._insert_sync, record)

    def _insert_sync(self, record: MediaItemRecord) -> bool:
        doc_id = media_document_id(record.owner_user_id, record.media_id)
        try:
            self._collection().document(doc_id).create(
                {
                    "owner_user_id": record.owner_user_id,
                    "owner_ig_id": record.owner_ig_id,
                    "sender_ig_id": record.sender_ig_id,
                    "media_type": record.media_type,
                    "media_id": record.media_id,
                    "url": record.url,
                    "title": record.title,
                    "created_at": record.created_at or datetime.now(UTC),
                },
                timeout=self._timeout,
            )
        except AlreadyExists:
            return False
        return True
