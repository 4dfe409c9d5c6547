"""Testes do InMemoryEventPublisher."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.infra.queue import InMemoryEventPublisher
from app.protocols.queue import PublishOutcome
from tests.fakes.fake_instagram import make_event


@pytest.mark.asyncio
async def test_publish_delivers_inline() -> None:
    handler = AsyncMock()
    publisher = InMemoryEventPublisher(handler)
    event = make_event()

    assert await publisher.publish(event) is PublishOutcome.PUBLISHED

    handler.assert_awaited_once_with(event)
    assert publisher.published == [event]


@pytest.mark.asyncio
async def test_same_mid_is_deduplicated() -> None:
    handler = AsyncMock()
    publisher = InMemoryEventPublisher(handler)

    await publisher.publish(make_event())
    outcome = await publisher.publish(make_event(text="again"))

    assert outcome is PublishOutcome.DEDUPLICATED
    assert handler.await_count == 1


@pytest.mark.asyncio
async def test_handler_failure_does_not_fail_publish() -> None:
    publisher = InMemoryEventPublisher()
    publisher.set_handler(AsyncMock(side_effect=RuntimeError("consumer down")))

    assert await publisher.publish(make_event()) is PublishOutcome.PUBLISHED


@pytest.mark.asyncio
async def test_without_handler_only_records() -> None:
    publisher = InMemoryEventPublisher()

    await publisher.publish(make_event())

    assert [event.mid for event in publisher.published] == ["M1"]
