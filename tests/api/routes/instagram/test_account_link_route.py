"""Testes da rota POST /auth/verify-instagram."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from app.app import create_app
from app.protocols.models import VerificationTokenRecord
from app.services import hash_token
from tests.fakes.fake_instagram import SERVICE_TOKEN, build_test_container
from utils.errors import FirestoreUnavailableError

PATH = "/auth/verify-instagram"


def _session(user_id: str = "user-1") -> dict[str, str]:
    return {"x-service-token": SERVICE_TOKEN, "x-user-id": user_id}


def _issue_token(container, ig_id: str = "U1") -> str:
    async def _issue() -> str:
        await container.stores.profiles.upsert(ig_id)
        issued = await container.token_service.create(ig_id, "M1")
        return issued.token_plain

    return asyncio.run(_issue())


def test_unauthenticated_request_is_rejected() -> None:
    client = TestClient(create_app(build_test_container()))

    response = client.post(PATH, json={"token": "t", "ig_id": "U1"})

    assert response.status_code == 401
    assert response.json() == {"error": "You must be logged in to verify your Instagram account"}


def test_missing_fields() -> None:
    client = TestClient(create_app(build_test_container()))

    response = client.post(PATH, json={"token": "t"}, headers=_session())

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: token, ig_id"}


def test_links_profile_and_consumes_token() -> None:
    container = build_test_container()
    token_plain = _issue_token(container)
    client = TestClient(create_app(container))

    response = client.post(PATH, json={"token": token_plain, "ig_id": "U1"}, headers=_session())

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Instagram account linked successfully"}
    profile = asyncio.run(container.stores.profiles.get("U1"))
    assert profile is not None
    assert profile.connected_user_id == "user-1"
    assert container.stores.tokens.all()[0].consumed is True


def test_token_is_single_use() -> None:
    container = build_test_container()
    token_plain = _issue_token(container)
    client = TestClient(create_app(container))

    client.post(PATH, json={"token": token_plain, "ig_id": "U1"}, headers=_session())
    response = client.post(PATH, json={"token": token_plain, "ig_id": "U1"}, headers=_session())

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid or expired verification token"}


def test_token_bound_to_other_profile_is_invalid() -> None:
    container = build_test_container()
    token_plain = _issue_token(container, ig_id="U1")
    client = TestClient(create_app(container))

    response = client.post(PATH, json={"token": token_plain, "ig_id": "U2"}, headers=_session())

    assert response.status_code == 400
    assert container.stores.tokens.all()[0].consumed is False


def test_expired_token() -> None:
    container = build_test_container()
    record = VerificationTokenRecord(
        token_hash=hash_token("old-token"),
        ig_id="U1",
        expires_at=datetime.now(UTC) - timedelta(minutes=1),
        created_by_event_id="M1",
    )
    asyncio.run(container.stores.tokens.create(record))
    client = TestClient(create_app(container))

    response = client.post(PATH, json={"token": "old-token", "ig_id": "U1"}, headers=_session())

    assert response.status_code == 400
    assert response.json() == {"error": "Verification token has expired"}


def test_profile_linked_to_other_user() -> None:
    container = build_test_container()
    token_plain = _issue_token(container)
    asyncio.run(container.stores.profiles.link_user("U1", "someone-else"))
    client = TestClient(create_app(container))

    response = client.post(PATH, json={"token": token_plain, "ig_id": "U1"}, headers=_session())

    assert response.status_code == 400
    assert response.json() == {"error": "Instagram account already linked to another user"}
    assert container.stores.tokens.all()[0].consumed is False


def test_storage_failure_returns_500() -> None:
    container = build_test_container()
    container.account_link.link = AsyncMock(  # type: ignore[method-assign]
        side_effect=FirestoreUnavailableError("down")
    )
    client = TestClient(create_app(container))

    response = client.post(PATH, json={"token": "t", "ig_id": "U1"}, headers=_session())

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to link Instagram account"}
