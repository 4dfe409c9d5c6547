"""Stores em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.

Cada operação roda sem `await` interno, portanto é atômica no event loop.
As mesmas garantias de unicidade do Firestore valem aqui.
"""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime

from app.domain.timestamps import normalize_timestamp
from app.protocols.models import (
    InstagramProfile,
    MediaItemRecord,
    MessageRecord,
    MessagingEvent,
    OutboundMessageRecord,
    OutboundStatus,
    ProfileMetadata,
    VerificationTokenRecord,
)
from app.protocols.stores import (
    MediaStoreProtocol,
    MessageStoreProtocol,
    OutboundMessageStoreProtocol,
    ProfileStoreProtocol,
    VerificationTokenStoreProtocol,
)
from utils.errors import ProfileAlreadyLinkedError


def _now() -> datetime:
    return datetime.now(UTC)


class MemoryProfileStore(ProfileStoreProtocol):
    """Store de perfis em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, InstagramProfile] = {}

    async def upsert(
        self,
        ig_id: str,
        metadata: ProfileMetadata | None = None,
    ) -> InstagramProfile:
        now = _now()
        fields = metadata.non_empty_fields() if metadata else {}
        existing = self._store.get(ig_id)
        if existing is None:
            profile = InstagramProfile(ig_id=ig_id, created_at=now, updated_at=now, **fields)
        else:
            profile = dataclasses.replace(existing, updated_at=now, **fields)
        self._store[ig_id] = profile
        return profile

    async def get(self, ig_id: str) -> InstagramProfile | None:
        return self._store.get(ig_id)

    async def link_user(self, ig_id: str, user_id: str) -> InstagramProfile:
        now = _now()
        existing = self._store.get(ig_id)
        if existing is None:
            existing = InstagramProfile(ig_id=ig_id, created_at=now, updated_at=now)
        if existing.connected_user_id:
            if existing.connected_user_id != user_id:
                raise ProfileAlreadyLinkedError(ig_id)
            return existing
        profile = dataclasses.replace(
            existing,
            connected_user_id=user_id,
            connected_at=now,
            updated_at=now,
        )
        self._store[ig_id] = profile
        return profile


class MemoryMessageStore(MessageStoreProtocol):
    """Store de mensagens em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, MessageRecord] = {}

    async def insert_if_absent(
        self,
        event: MessagingEvent,
    ) -> tuple[MessageRecord, bool]:
        existing = self._store.get(event.mid)
        if existing is not None:
            return existing, False

        record = MessageRecord(
            mid=event.mid,
            sender_ig_id=event.sender_ig_id,
            recipient_ig_id=event.recipient_ig_id,
            received_at=normalize_timestamp(event.timestamp),
            message_text=event.message_text,
            attachments=event.attachments,
            created_at=_now(),
        )
        self._store[event.mid] = record
        return record, True

    async def get(self, mid: str) -> MessageRecord | None:
        return self._store.get(mid)

    async def mark_processed(self, mid: str) -> None:
        record = self._store.get(mid)
        if record is not None:
            self._store[mid] = dataclasses.replace(record, processed=True)

    def count(self) -> int:
        """Total de mensagens armazenadas."""
        return len(self._store)


class MemoryVerificationTokenStore(VerificationTokenStoreProtocol):
    """Store de tokens em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, VerificationTokenRecord] = {}

    async def create(self, record: VerificationTokenRecord) -> None:
        if record.token_hash in self._store:
            raise ValueError("token_hash duplicado")
        self._store[record.token_hash] = dataclasses.replace(
            record,
            created_at=record.created_at or _now(),
        )

    async def get_active(
        self,
        token_hash: str,
        ig_id: str,
    ) -> VerificationTokenRecord | None:
        record = self._store.get(token_hash)
        if record is None or record.ig_id != ig_id or record.consumed:
            return None
        return record

    async def mark_consumed(self, token_hash: str) -> bool:
        record = self._store.get(token_hash)
        if record is None or record.consumed:
            return False
        self._store[token_hash] = dataclasses.replace(record, consumed=True)
        return True

    async def exists_for_event(self, ig_id: str, event_id: str) -> bool:
        return any(
            record.ig_id == ig_id and record.created_by_event_id == event_id
            for record in self._store.values()
        )

    def all(self) -> list[VerificationTokenRecord]:
        """Snapshot dos tokens armazenados."""
        return list(self._store.values())


class MemoryOutboundMessageStore(OutboundMessageStoreProtocol):
    """Store de DMs enviadas em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, OutboundMessageRecord] = {}

    async def create(self, record: OutboundMessageRecord) -> None:
        now = _now()
        self._store[record.id] = dataclasses.replace(
            record,
            created_at=record.created_at or now,
            updated_at=record.updated_at or now,
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
        record = self._store.get(outbound_id)
        if record is None:
            raise KeyError(outbound_id)
        self._store[outbound_id] = dataclasses.replace(
            record,
            status=status,
            attempts=attempts,
            remote_message_id=remote_message_id or record.remote_message_id,
            error=error,
            updated_at=_now(),
        )

    async def get(self, outbound_id: str) -> OutboundMessageRecord | None:
        return self._store.get(outbound_id)

    def all(self) -> list[OutboundMessageRecord]:
        """Snapshot dos registros armazenados."""
        return list(self._store.values())


class MemoryMediaStore(MediaStoreProtocol):
    """Store de mídias em memória: apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[tuple[str, str], MediaItemRecord] = {}

    async def exists(self, owner_user_id: str, media_id: str) -> bool:
        return (owner_user_id, media_id) in self._store

    async def insert(self, record: MediaItemRecord) -> bool:
        key = (record.owner_user_id, record.media_id)
        if key in self._store:
            return False
        self._store[key] = dataclasses.replace(
            record,
            created_at=record.created_at or _now(),
        )
        return True

    def all(self) -> list[MediaItemRecord]:
        """Snapshot das mídias armazenadas."""
        return list(self._store.values())
