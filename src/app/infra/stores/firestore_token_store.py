"""Firestore Verification Token Store.

Estrutura no Firestore:
    verification_tokens/{token_hash}

Apenas o hash SHA-256 é persistido. O consumo é um compare-and-set
com precondição de `update_time`: quem perde a corrida recebe False.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import FailedPrecondition, NotFound
from google.cloud.firestore_v1.base_query import FieldFilter

from app.infra.stores.firestore_base import FirestoreStoreBase
from app.protocols.models import VerificationTokenRecord
from app.protocols.stores import VerificationTokenStoreProtocol

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore_v1.base_document import DocumentSnapshot

logger = logging.getLogger(__name__)

TOKENS_COLLECTION = "verification_tokens"


def token_from_snapshot(snapshot: DocumentSnapshot) -> VerificationTokenRecord:
    """Converte snapshot Firestore em VerificationTokenRecord."""
    data: dict[str, Any] = snapshot.to_dict() or {}
    return VerificationTokenRecord(
        token_hash=data.get("token_hash") or snapshot.id,
        ig_id=data.get("ig_id", ""),
        expires_at=data["expires_at"],
        created_by_event_id=data.get("created_by_event_id", ""),
        consumed=bool(data.get("consumed", False)),
        created_at=data.get("created_at"),
    )


class FirestoreVerificationTokenStore(FirestoreStoreBase, VerificationTokenStoreProtocol):
    """Store de tokens de verificação no Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = TOKENS_COLLECTION,
        timeout_seconds: float = 10.0,
    ) -> None:
        super().__init__(firestore_client, collection, timeout_seconds)

    async def create(self, record: VerificationTokenRecord) -> None:
        await self._run("create", self._create_sync, record)

    def _create_sync(self, record: VerificationTokenRecord) -> None:
        self._collection().document(record.token_hash).create(
            {
                "token_hash": record.token_hash,
                "ig_id": record.ig_id,
                "expires_at": record.expires_at,
                "consumed": False,
                "created_by_event_id": record.created_by_event_id,
                "created_at": record.created_at or datetime.now(UTC),
            },
            timeout=self._timeout,
        )

    async def get_active(
        self,
        token_hash: str,
        ig_id: str,
    ) -> VerificationTokenRecord | None:
        return await self._run("get_active", self._get_active_sync, token_hash, ig_id)

    def _get_active_sync(
        self,
        token_hash: str,
        ig_id: str,
    ) -> VerificationTokenRecord | None:
        snapshot = self._collection().document(token_hash).get(timeout=self._timeout)
        if not snapshot.exists:
            return None
        record = token_from_snapshot(snapshot)
        if record.ig_id != ig_id or record.consumed:
            return None
        return record

    async def mark_consumed(self, token_hash: str) -> bool:
        return await self._run("mark_consumed", self._mark_consumed_sync, token_hash)

    def _mark_consumed_sync(self, token_hash: str) -> bool:
        ref = self._collection().document(token_hash)
        snapshot = ref.get(timeout=self._timeout)
        if not snapshot.exists or (snapshot.to_dict() or {}).get("consumed"):
            return False

        try:
            ref.update(
                {"consumed": True, "consumed_at": datetime.now(UTC)},
                option=self._db.write_option(last_update_time=snapshot.update_time),
                timeout=self._timeout,
            )
        except (FailedPrecondition, NotFound):
            logger.info("token_consume_race_lost")
            return False
        return True

    async def exists_for_event(self, ig_id: str, event_id: str) -> bool:
        return await self._run(
            "exists_for_event",
            self._exists_for_event_sync,
            ig_id,
            event_id,
        )

    def _exists_for_event_sync(self, ig_id: str, event_id: str) -> bool:
        query = (
            self._collection()
            .where(filter=FieldFilter("ig_id", "==", ig_id))
            .where(filter=FieldFilter("created_by_event_id", "==", event_id))
            .limit(1)
        )
        return len(list(query.get(timeout=self._timeout))) > 0
