"""Testes do QueueBridge."""

from __future__ import annotations

import asyncio

import pytest

from app.coordinators.instagram import QueueBridge
from app.infra.queue import InMemoryEventPublisher
from app.protocols.queue import EventPublisherProtocol, PublishOutcome
from tests.fakes.fake_instagram import make_event
from utils.errors import QueuePublishError


class _FlakyPublisher(EventPublisherProtocol):
    """Falha para os mids indicados; demora para os lentos."""

    def __init__(self, failing: set[str] | None = None, slow: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.slow = slow or set()

    async def publish(self, event):  # type: ignore[no-untyped-def]
        if event.mid in self.slow:
            await asyncio.sleep(1)
        if event.mid in self.failing:
            raise QueuePublishError("down")
        return PublishOutcome.PUBLISHED


@pytest.mark.asyncio
async def test_empty_batch() -> None:
    summary = await QueueBridge(InMemoryEventPublisher()).publish_all([])

    assert summary.total == 0
    assert summary.published == 0


@pytest.mark.asyncio
async def test_counts_published_and_deduplicated() -> None:
    bridge = QueueBridge(InMemoryEventPublisher())

    events = [make_event(mid="M1"), make_event(mid="M2"), make_event(mid="M1")]

    summary = await bridge.publish_all(events)

    assert summary.total == 3
    assert summary.published == 2
    assert summary.deduplicated == 1
    assert summary.failed == 0


@pytest.mark.asyncio
async def test_failures_are_reported_not_raised() -> None:
    bridge = QueueBridge(_FlakyPublisher(failing={"M2"}))

    summary = await bridge.publish_all([make_event(mid="M1"), make_event(mid="M2")])

    assert summary.published == 1
    assert summary.failed == 1
    assert summary.failed_mids == ["M2"]


@pytest.mark.asyncio
async def test_timeout_counts_as_failure() -> None:
    bridge = QueueBridge(_FlakyPublisher(slow={"M1"}), publish_timeout_seconds=0.01)

    summary = await bridge.publish_all([make_event(mid="M1"), make_event(mid="M2")])

    assert summary.failed_mids == ["M1"]
    assert summary.published == 1


@pytest.mark.asyncio
async def test_without_timeout_inline_handler_runs_to_completion() -> None:
    completed: list[str] = []

    async def _slow_handler(event) -> None:  # type: ignore[no-untyped-def]
        await asyncio.sleep(0.05)
        completed.append(event.mid)

    bridge = QueueBridge(InMemoryEventPublisher(_slow_handler), publish_timeout_seconds=None)

    summary = await bridge.publish_all([make_event(mid="M1")])

    assert summary.published == 1
    assert summary.failed == 0
    assert completed == ["M1"]
