"""Fakes e builders compartilhados pelos testes do canal Instagram."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx
from starlette.requests import Request

from app.bootstrap.instagram_factory import ServiceContainer, build_container
from app.protocols.models import HandoffResult, MessagingEvent
from config.settings import (
    BaseSettings,
    CloudTasksSettings,
    FirestoreSettings,
    InstagramSettings,
    StoreSettings,
)

SERVICE_TOKEN = "svc-token"
VERIFY_TOKEN = "verify-me"
BUSINESS_ID = "BIZ"
APP_BASE_URL = "https://reeva.app"
CONSUMER_URL = "https://reeva-ingest.run.app/queues/instagram-ingestion"
INVOKER = "tasks-invoker@reeva.iam.gserviceaccount.com"
GOOD_OIDC_TOKEN = "good-oidc-token"


def make_event(
    mid: str = "M1",
    sender: str = "U1",
    recipient: str = BUSINESS_ID,
    timestamp: str = "1700000000000",
    text: str | None = "hello",
    attachments: list[dict[str, Any]] | None = None,
) -> MessagingEvent:
    return MessagingEvent(
        mid=mid,
        sender_ig_id=sender,
        recipient_ig_id=recipient,
        timestamp=timestamp,
        message_text=text,
        attachments=attachments,
    )


def reel_attachment(media_id: str = "R1", url: str = "https://ig.example/reel/R1") -> dict[str, Any]:
    return {
        "type": "ig_reel",
        "payload": {"reel_video_id": media_id, "url": url, "title": "Reel title"},
    }


def post_attachment(media_id: str = "P1", url: str = "https://ig.example/p/P1") -> dict[str, Any]:
    return {"type": "ig_post", "payload": {"ig_post_media_id": media_id, "url": url}}


class FakeSender:
    """Sender de DM que falha nas primeiras `failures` chamadas."""

    def __init__(self, failures: list[Exception] | None = None, remote_id: str = "remote-1") -> None:
        self.failures = list(failures or [])
        self.remote_id = remote_id
        self.calls: list[tuple[str, str]] = []

    async def send_text(self, recipient_ig_id: str, text: str) -> str | None:
        self.calls.append((recipient_ig_id, text))
        if self.failures:
            raise self.failures.pop(0)
        return self.remote_id


class FakeHandoff:
    """Hand-off que registra as chamadas e devolve resultado fixo."""

    def __init__(self, ok: bool = True, error: Exception | None = None) -> None:
        self.ok = ok
        self.error = error
        self.calls: list[tuple[Any, Any]] = []

    async def submit(self, message: Any, profile: Any) -> HandoffResult:
        self.calls.append((message, profile))
        if self.error is not None:
            raise self.error
        return HandoffResult(ok=self.ok, detail="" if self.ok else "rejected")


async def no_sleep(_seconds: float) -> None:
    return None


class GraphApiStub:
    """Handler do httpx.MockTransport imitando a Graph API."""

    def __init__(
        self,
        send_status: int = 200,
        send_body: dict[str, Any] | None = None,
        profile_status: int = 200,
        profile_body: dict[str, Any] | None = None,
    ) -> None:
        self.send_status = send_status
        self.send_body = send_body if send_body is not None else {"message_id": "remote-1"}
        self.profile_status = profile_status
        self.profile_body = profile_body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            return httpx.Response(self.send_status, json=self.send_body)
        ig_id = request.url.path.rsplit("/", 1)[-1]
        body = self.profile_body if self.profile_body is not None else {
            "id": ig_id,
            "username": "reeva_fan",
            "name": "Reeva Fan",
            "profile_pic": "https://cdn.example/pic.jpg",
        }
        return httpx.Response(self.profile_status, json=body)

    def sent_payloads(self) -> list[dict[str, Any]]:
        return [json.loads(req.content) for req in self.requests if req.method == "POST"]


def fake_verify_oidc(token: str, _request: Any, audience: str | None = None) -> dict[str, Any]:
    if token != GOOD_OIDC_TOKEN or audience != CONSUMER_URL:
        raise ValueError("invalid token")
    return {"email": INVOKER, "email_verified": True, "aud": audience}


def build_test_container(
    *,
    graph: GraphApiStub | None = None,
    handoff: FakeHandoff | None = None,
    internal_service_token: str = SERVICE_TOKEN,
    require_oidc: bool = False,
    max_delivery_attempts: int = 3,
    access_token: str = "ig-access-token",
) -> ServiceContainer:
    """Container com stores e fila em memória e Graph API simulada."""
    cloud_tasks = CloudTasksSettings(max_delivery_attempts=max_delivery_attempts)
    if require_oidc:
        cloud_tasks = CloudTasksSettings(
            consumer_url=CONSUMER_URL,
            invoker_service_account=INVOKER,
            max_delivery_attempts=max_delivery_attempts,
        )
    return build_container(
        base=BaseSettings(environment="development", internal_service_token=internal_service_token),
        instagram=InstagramSettings(
            verify_token=VERIFY_TOKEN,
            access_token=access_token,
            scoped_id=BUSINESS_ID,
            app_base_url=APP_BASE_URL,
        ),
        cloud_tasks=cloud_tasks,
        store_settings=StoreSettings(),
        firestore_settings=FirestoreSettings(),
        http_transport=httpx.MockTransport(graph or GraphApiStub()),
        handoff=handoff or FakeHandoff(),
        oidc_verify_func=fake_verify_oidc,
        sleep=no_sleep,
    )


def build_request(
    *,
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    body: bytes = b"",
    headers: dict[str, str] | None = None,
    state: Any = None,
) -> Request:
    """Request Starlette mínimo para chamar handlers diretamente."""
    raw_headers = [
        (k.lower().encode("utf-8"), v.encode("utf-8")) for k, v in (headers or {}).items()
    ]
    scope: dict[str, Any] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string.encode("utf-8"),
        "headers": raw_headers,
    }
    if state is not None:
        scope["app"] = SimpleNamespace(state=state)
    sent = False

    async def _receive() -> dict[str, object]:
        nonlocal sent
        if sent:
            return {"type": "http.request", "body": b"", "more_body": False}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, _receive)
