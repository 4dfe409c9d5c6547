"""Testes dos stores em memória."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.infra.stores.memory_stores import (
    MemoryMediaStore,
    MemoryMessageStore,
    MemoryOutboundMessageStore,
    MemoryProfileStore,
    MemoryVerificationTokenStore,
)
from app.protocols.models import (
    MediaItemRecord,
    OutboundMessageRecord,
    ProfileMetadata,
    VerificationTokenRecord,
)
from tests.fakes.fake_instagram import make_event
from utils.errors import InvalidTimestampError, ProfileAlreadyLinkedError


class TestMemoryProfileStore:
    """Testes do MemoryProfileStore."""

    @pytest.mark.asyncio
    async def test_upsert_creates_then_merges(self) -> None:
        store = MemoryProfileStore()

        created = await store.upsert("U1", ProfileMetadata(username="fan"))
        merged = await store.upsert("U1", ProfileMetadata(username="", display_name="Fan"))

        assert created.username == "fan"
        assert merged.username == "fan"
        assert merged.display_name == "Fan"
        assert merged.created_at == created.created_at
        assert merged.updated_at is not None

    @pytest.mark.asyncio
    async def test_upsert_never_changes_link(self) -> None:
        store = MemoryProfileStore()
        await store.link_user("U1", "user-1")

        profile = await store.upsert("U1")

        assert profile.connected_user_id == "user-1"

    @pytest.mark.asyncio
    async def test_link_user_once(self) -> None:
        store = MemoryProfileStore()
        await store.upsert("U1")

        linked = await store.link_user("U1", "user-1")
        again = await store.link_user("U1", "user-1")

        assert linked.connected_user_id == "user-1"
        assert again.connected_at == linked.connected_at
        with pytest.raises(ProfileAlreadyLinkedError):
            await store.link_user("U1", "user-2")

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        assert await MemoryProfileStore().get("nobody") is None


class TestMemoryMessageStore:
    """Testes do MemoryMessageStore."""

    @pytest.mark.asyncio
    async def test_insert_if_absent(self) -> None:
        store = MemoryMessageStore()

        first, created = await store.insert_if_absent(make_event(text="first"))
        second, created_again = await store.insert_if_absent(make_event(text="second"))

        assert created is True
        assert created_again is False
        assert second.message_text == "first"
        assert first.received_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)
        assert store.count() == 1

    @pytest.mark.asyncio
    async def test_invalid_timestamp_not_stored(self) -> None:
        store = MemoryMessageStore()

        with pytest.raises(InvalidTimestampError):
            await store.insert_if_absent(make_event(timestamp="garbage"))

        assert store.count() == 0

    @pytest.mark.asyncio
    async def test_mark_processed(self) -> None:
        store = MemoryMessageStore()
        await store.insert_if_absent(make_event())

        await store.mark_processed("M1")
        await store.mark_processed("missing")

        record = await store.get("M1")
        assert record is not None
        assert record.processed is True


class TestMemoryVerificationTokenStore:
    """Testes do MemoryVerificationTokenStore."""

    RECORD = VerificationTokenRecord(
        token_hash="h1",
        ig_id="U1",
        expires_at=datetime(2030, 1, 1, tzinfo=UTC),
        created_by_event_id="M1",
    )

    @pytest.mark.asyncio
    async def test_duplicate_hash_rejected(self) -> None:
        store = MemoryVerificationTokenStore()
        await store.create(self.RECORD)

        with pytest.raises(ValueError, match="duplicado"):
            await store.create(self.RECORD)

    @pytest.mark.asyncio
    async def test_consume_compare_and_set(self) -> None:
        store = MemoryVerificationTokenStore()
        await store.create(self.RECORD)

        assert await store.get_active("h1", "U1") is not None
        assert await store.mark_consumed("h1") is True
        assert await store.mark_consumed("h1") is False
        assert await store.get_active("h1", "U1") is None
        assert await store.mark_consumed("unknown") is False

    @pytest.mark.asyncio
    async def test_exists_for_event(self) -> None:
        store = MemoryVerificationTokenStore()
        await store.create(self.RECORD)

        assert await store.exists_for_event("U1", "M1") is True
        assert await store.exists_for_event("U2", "M1") is False


class TestMemoryOutboundMessageStore:
    """Testes do MemoryOutboundMessageStore."""

    @pytest.mark.asyncio
    async def test_create_and_update(self) -> None:
        store = MemoryOutboundMessageStore()
        await store.create(
            OutboundMessageRecord(id="o1", recipient_ig_id="U1", kind="custom", payload={})
        )

        await store.update("o1", status="sent", attempts=2, remote_message_id="m.1")

        record = await store.get("o1")
        assert record is not None
        assert record.status == "sent"
        assert record.attempts == 2
        assert record.remote_message_id == "m.1"

    @pytest.mark.asyncio
    async def test_update_unknown_raises(self) -> None:
        with pytest.raises(KeyError):
            await MemoryOutboundMessageStore().update("nope", status="failed", attempts=1)


class TestMemoryMediaStore:
    """Testes do MemoryMediaStore."""

    @pytest.mark.asyncio
    async def test_unique_per_owner_and_media(self) -> None:
        store = MemoryMediaStore()
        record = MediaItemRecord(
            owner_user_id="user-1",
            owner_ig_id="U1",
            sender_ig_id="U1",
            media_type="post",
            media_id="P1",
            url="https://ig.example/p/P1",
        )

        assert await store.insert(record) is True
        assert await store.insert(record) is False
        assert await store.exists("user-1", "P1") is True
        assert await store.exists("user-2", "P1") is False
