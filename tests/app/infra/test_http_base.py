"""Testes do HttpClient base."""

from __future__ import annotations

import httpx
import pytest

from app.infra.http import HttpClient, HttpError


def _client(handler) -> HttpClient:  # type: ignore[no-untyped-def]
    return HttpClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_post_returns_response() -> None:
    client = _client(lambda request: httpx.Response(200, json={"ok": True}))

    response = await client.post("https://graph.example/messages", json={"a": 1})

    assert response.json() == {"ok": True}


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [408, 429, 500, 503])
async def test_retryable_status(status_code: int) -> None:
    client = _client(lambda request: httpx.Response(status_code, json={}))

    with pytest.raises(HttpError) as exc_info:
        await client.get("https://graph.example/U1")

    assert exc_info.value.is_retryable is True
    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
async def test_client_error_is_returned_to_caller() -> None:
    client = _client(lambda request: httpx.Response(400, json={"error": {}}))

    response = await client.get("https://graph.example/U1")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_timeout_is_retryable() -> None:
    def _timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(HttpError, match="http_timeout") as exc_info:
        await _client(_timeout).post("https://graph.example/messages", json={})

    assert exc_info.value.is_retryable is True


@pytest.mark.asyncio
async def test_connection_error_is_retryable() -> None:
    def _refused(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(HttpError, match="http_connection_error"):
        await _client(_refused).get("https://graph.example/U1")
