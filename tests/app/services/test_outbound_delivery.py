"""Testes do OutboundDeliveryService."""

from __future__ import annotations

import pytest

from app.infra.http import HttpError
from app.infra.stores.memory_stores import MemoryOutboundMessageStore
from app.services import OutboundDeliveryService, backoff_delay
from tests.fakes.fake_instagram import FakeSender


class _Sleeps:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def _service(
    sender: FakeSender,
    max_attempts: int = 3,
) -> tuple[OutboundDeliveryService, MemoryOutboundMessageStore, _Sleeps]:
    store = MemoryOutboundMessageStore()
    sleeps = _Sleeps()
    service = OutboundDeliveryService(
        sender,
        store,
        max_attempts=max_attempts,
        backoff_base_seconds=1.0,
        backoff_max_seconds=10.0,
        sleep=sleeps,
    )
    return service, store, sleeps


class TestBackoffDelay:
    """Espera exponencial com teto."""

    def test_doubles_each_attempt(self) -> None:
        assert [backoff_delay(n, 1.0, 10.0) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped(self) -> None:
        assert backoff_delay(5, 1.0, 10.0) == 10.0


class TestSendWithRetry:
    """Envio com tentativas registradas em outbound_messages."""

    @pytest.mark.asyncio
    async def test_first_attempt_success(self) -> None:
        sender = FakeSender(remote_id="m.1")
        service, store, sleeps = _service(sender)

        result = await service.send_with_retry("U1", "hello", "acknowledgement")

        assert result.remote_message_id == "m.1"
        record = store.all()[0]
        assert record.id == result.outbound_message_id
        assert record.status == "sent"
        assert record.attempts == 1
        assert record.payload == {"text": "hello"}
        assert record.kind == "acknowledgement"
        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_success_after_failures(self) -> None:
        sender = FakeSender(failures=[HttpError("http_timeout", is_retryable=True)])
        service, store, sleeps = _service(sender)

        await service.send_with_retry("U1", "hello", "verification")

        record = store.all()[0]
        assert record.status == "sent"
        assert record.attempts == 2
        assert len(sender.calls) == 2
        assert sleeps.delays == [1.0]

    @pytest.mark.asyncio
    async def test_exhaustion_marks_failed_and_raises(self) -> None:
        errors = [HttpError(f"fail-{n}", status_code=503, is_retryable=True) for n in range(3)]
        sender = FakeSender(failures=errors)
        service, store, sleeps = _service(sender)

        with pytest.raises(HttpError, match="fail-2"):
            await service.send_with_retry("U1", "hello", "custom")

        record = store.all()[0]
        assert record.status == "failed"
        assert record.attempts == 3
        assert record.error == "fail-2"
        assert len(sender.calls) == 3
        assert sleeps.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_single_attempt_configuration(self) -> None:
        sender = FakeSender(failures=[RuntimeError("boom")])
        service, store, sleeps = _service(sender, max_attempts=1)

        with pytest.raises(RuntimeError):
            await service.send_with_retry("U1", "hello", "custom")

        assert store.all()[0].status == "failed"
        assert sleeps.delays == []

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError, match="max_attempts"):
            _service(FakeSender(), max_attempts=0)
