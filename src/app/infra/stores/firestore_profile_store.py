"""Firestore Profile Store: perfis Instagram.

Estrutura no Firestore:
    instagram_profiles/{document_id_for(ig_id)}

Upsert sem transação: `create()` e, em AlreadyExists, merge dos campos
não vazios. O vínculo com usuário usa precondição de `update_time`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import AlreadyExists, FailedPrecondition

from app.infra.stores.firestore_base import FirestoreStoreBase, document_id_for
from app.protocols.models import InstagramProfile, ProfileMetadata
from app.protocols.stores import ProfileStoreProtocol
from utils.errors import FirestoreUnavailableError, ProfileAlreadyLinkedError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore_v1.base_document import DocumentSnapshot

logger = logging.getLogger(__name__)

PROFILES_COLLECTION = "instagram_profiles"

# Tentativas do compare-and-set de vínculo antes de desistir
_LINK_MAX_ROUNDS = 3


def profile_from_snapshot(snapshot: DocumentSnapshot) -> InstagramProfile:
    """Converte snapshot Firestore em InstagramProfile."""
    data: dict[str, Any] = snapshot.to_dict() or {}
    return InstagramProfile(
        ig_id=data.get("ig_id") or snapshot.id,
        username=data.get("username") or "",
        display_name=data.get("display_name") or "",
        profile_pic_url=data.get("profile_pic_url"),
        connected_user_id=data.get("connected_user_id"),
        connected_at=data.get("connected_at"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )


class FirestoreProfileStore(FirestoreStoreBase, ProfileStoreProtocol):
    """Store de perfis Instagram no Firestore."""

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection: str = PROFILES_COLLECTION,
        timeout_seconds: float = 10.0,
    ) -> None:
        super().__init__(firestore_client, collection, timeout_seconds)

    async def upsert(
        self,
        ig_id: str,
        metadata: ProfileMetadata | None = None,
    ) -> InstagramProfile:
        return await self._run("upsert", self._upsert_sync, ig_id, metadata)

    def _upsert_sync(
        self,
        ig_id: str,
        metadata: ProfileMetadata | None,
    ) -> InstagramProfile:
        ref = self._collection().document(document_id_for(ig_id))
        now = datetime.now(UTC)
        fields = metadata.non_empty_fields() if metadata else {}

        try:
            ref.create(
                {
                    "ig_id": ig_id,
                    "username": fields.get("username", ""),
                    "display_name": fields.get("display_name", ""),
                    "profile_pic_url": fields.get("profile_pic_url"),
                    "connected_user_id": None,
                    "connected_at": None,
                    "created_at": now,
                    "updated_at": now,
                },
                timeout=self._timeout,
            )
            logger.info("profile_created", extra={"ig_id": ig_id})
        except AlreadyExists:
            ref.set({**fields, "updated_at": now}, merge=True, timeout=self._timeout)

        return profile_from_snapshot(ref.get(timeout=self._timeout))

    async def get(self, ig_id: str) -> InstagramProfile | None:
        return await self._run("get", self._get_sync, ig_id)

    def _get_sync(self, ig_id: str) -> InstagramProfile | None:
        ref = self._collection().document(document_id_for(ig_id))
        snapshot = ref.get(timeout=self._timeout)
        if not snapshot.exists:
            return None
        return profile_from_snapshot(snapshot)

    async def link_user(self, ig_id: str, user_id: str) -> InstagramProfile:
        return await self._run("link_user", self._link_user_sync, ig_id, user_id)

    def _link_user_sync(self, ig_id: str, user_id: str) -> InstagramProfile:
        ref = self._collection().document(document_id_for(ig_id))

        for _ in range(_LINK_MAX_ROUNDS):
            snapshot = ref.get(timeout=self._timeout)
            now = datetime.now(UTC)
            link_fields = {
                "connected_user_id": user_id,
                "connected_at": now,
                "updated_at": now,
            }

            if not snapshot.exists:
                try:
                    ref.create(
                        {"ig_id": ig_id, "created_at": now, **link_fields},
                        timeout=self._timeout,
                    )
                except AlreadyExists:
                    continue
                return profile_from_snapshot(ref.get(timeout=self._timeout))

            current = profile_from_snapshot(snapshot)
            if current.connected_user_id:
                if current.connected_user_id != user_id:
                    raise ProfileAlreadyLinkedError(ig_id)
                return current

            try:
                ref.update(
                    link_fields,
                    option=self._db.write_option(last_update_time=snapshot.update_time),
                    timeout=self._timeout,
                )
            except FailedPrecondition:
                continue
            logger.info("profile_linked", extra={"ig_id": ig_id})
            return profile_from_snapshot(ref.get(timeout=self._timeout))

        raise FirestoreUnavailableError(
            f"Vínculo do perfil {ig_id} não convergiu após {_LINK_MAX_ROUNDS} tentativas"
        )
